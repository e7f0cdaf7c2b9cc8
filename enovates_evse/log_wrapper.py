import inspect
import logging


def python_log_sink(name: str = "enovates_evse"):
    """Return an ad_log compatible sink that writes to the standard logging module.
    The sink accepts the same keyword arguments as an AppDaemon Hass.log: msg and level.
    """
    logger = logging.getLogger(name)

    def sink(msg: str, level: str = "INFO"):
        logger.log(getattr(logging, level.upper(), logging.INFO), msg)

    return sink


def get_class_method_logger(ad_log):
    def log(msg: str, level: str = ""):
        info = inspect.stack()[1][0]
        the_class = __truncate(info.f_locals["self"].__class__.__name__, 20)
        the_method = info.f_code.co_name
        # Callers sometimes start the message with the method name, it is added here already.
        msg = msg.replace(f"{the_method} ", "")
        the_method = __truncate(the_method, 20)
        line_no = info.f_lineno
        if level == "":
            level = "INFO"
        msg = f"{the_class}.{line_no} > {the_method} > {msg}"
        ad_log(msg=msg, level=level)

    def __truncate(the_string: str, length: int):
        if len(the_string) > length:
            length_end = int(length / 2)
            length = length - 1 - length_end
            the_string = the_string[:length] + "~" + the_string[-length_end:]
        return the_string

    return log

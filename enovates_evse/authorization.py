"""Authorization capability injected into chargers that require an entitlement."""

from abc import ABC, abstractmethod

from .exceptions import PermissionDenied


class Authorization(ABC):
    @abstractmethod
    def is_authorized(self) -> bool:
        raise NotImplementedError("Subclasses must implement is_authorized()")


class StaticAuthorization(Authorization):
    """Authorization decided once by the application, e.g. after validating a token at startup."""

    def __init__(self, authorized: bool):
        self._authorized = authorized

    def is_authorized(self) -> bool:
        return self._authorized


def require_authorization(authorization: Authorization, charger_name: str):
    """Raise PermissionDenied unless authorization allows using charger_name."""
    if authorization is None or not authorization.is_authorized():
        raise PermissionDenied(f"Authorization required for {charger_name}")

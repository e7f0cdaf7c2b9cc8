"""Lookup of charger factories by charger type.

The application creates a registry at startup, registers the chargers it
supports and passes the registry to whatever needs to create chargers.
"""

from typing import Awaitable, Callable

from ..authorization import Authorization
from ..exceptions import UnknownChargerType
from .base_charger import BaseCharger
from .enovates import new_enovates_from_config

ChargerFactory = Callable[[dict, Authorization], Awaitable[BaseCharger]]


class ChargerRegistry:
    def __init__(self):
        self._factories: dict[str, ChargerFactory] = {}

    def add(self, charger_type: str, factory: ChargerFactory):
        charger_type = charger_type.lower()
        if charger_type in self._factories:
            raise ValueError(f"Charger type '{charger_type}' already registered")
        self._factories[charger_type] = factory

    def types(self) -> list[str]:
        return sorted(self._factories)

    async def create(
        self, charger_type: str, communication_config: dict, authorization: Authorization
    ) -> BaseCharger:
        """Create a charger of the given type.

        Raises:
            UnknownChargerType: No factory registered for charger_type.
        """
        factory = self._factories.get(charger_type.lower(), None)
        if factory is None:
            raise UnknownChargerType(charger_type)
        return await factory(communication_config, authorization)


def register_default_chargers(registry: ChargerRegistry) -> ChargerRegistry:
    registry.add("enovates", new_enovates_from_config)
    return registry

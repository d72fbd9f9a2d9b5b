"""Getter registry for address scheme routing.

This module provides an ordered registry that maps getter names to getter
instances. Order matters: detection offers a source string to each getter in
registration order, so catch-all getters (the local filesystem) go last.
"""

from __future__ import annotations

from loguru import logger

from ..core.config import Config
from ..core.exceptions import SrcFetchError
from .base import Getter


# =============================================================================
# Exceptions
# =============================================================================


class RegistryError(SrcFetchError):
    """Base exception for registry operations."""

    pass


class UnknownGetterError(RegistryError):
    """No getter registered under the given name."""

    def __init__(self, name: str, address: str = ""):
        self.name = name
        self.address = address
        detail = f" (address: {address})" if address else ""
        super().__init__(f"No getter registered for '{name}'{detail}")


# =============================================================================
# Registry Implementation
# =============================================================================


class GetterRegistry:
    """Ordered registry of getters keyed by name.

    Example:
        registry = GetterRegistry()
        registry.register(HgGetter())
        registry.register(S3Getter())
        registry.register(FileGetter())

        getter = registry.get("s3")
        names = registry.names()  # ['hg', 's3', 'file']
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._getters: dict[str, Getter] = {}

    def register(self, getter: Getter, *, override: bool = False) -> None:
        """Append a getter to the registry.

        Args:
            getter: Getter instance. Its ``name`` is the registry key
                    (case-insensitive).
            override: If True, replace an existing registration in place.

        Raises:
            RegistryError: If the name is already registered and override=False.
        """
        name = getter.name.lower()
        if not name:
            raise RegistryError(f"Getter {getter!r} has no name")
        if name in self._getters and not override:
            raise RegistryError(
                f"Getter '{name}' is already registered. "
                f"Use override=True to replace."
            )
        self._getters[name] = getter
        logger.debug(f"Registered getter: {name!r}")

    def unregister(self, name: str) -> bool:
        """Remove a registered getter.

        Returns:
            True if the getter was registered and removed, False if not found.
        """
        name = name.lower()
        if name in self._getters:
            del self._getters[name]
            logger.debug(f"Unregistered getter: {name!r}")
            return True
        return False

    def get(self, name: str, address: str = "") -> Getter:
        """Look up a getter by name.

        Raises:
            UnknownGetterError: If nothing is registered under name.
        """
        getter = self._getters.get(name.lower())
        if getter is None:
            raise UnknownGetterError(name, address)
        return getter

    def is_registered(self, name: str) -> bool:
        return name.lower() in self._getters

    def names(self) -> list[str]:
        """Registered getter names in detection order."""
        return list(self._getters)

    def getters(self) -> list[Getter]:
        """Registered getters in detection order."""
        return list(self._getters.values())

    def __iter__(self):
        return iter(self.getters())

    def __len__(self) -> int:
        return len(self._getters)


# =============================================================================
# Default Registry
# =============================================================================

_default_registry: GetterRegistry | None = None


def create_registry(config: Config | None = None) -> GetterRegistry:
    """Build a registry holding the built-in getters in detection order."""
    from .filesystem import FileGetter
    from .hg import HgGetter
    from .s3 import S3Getter

    registry = GetterRegistry()
    registry.register(HgGetter(config))
    registry.register(S3Getter(config))
    registry.register(FileGetter(config))
    return registry


def get_default_registry() -> GetterRegistry:
    """Get the default registry, built lazily from ``Config.from_env()``."""
    global _default_registry
    if _default_registry is None:
        _default_registry = create_registry(Config.from_env())
    return _default_registry


def reset_default_registry() -> None:
    """Reset the default registry singleton.

    This is primarily useful for testing to ensure a clean state.
    """
    global _default_registry
    _default_registry = None

"""Source string detection.

Turns a loosely specified source (path, shorthand or URL) into an Address by
offering it to the registered getters in order:

1. a ``getter::`` prefix (or an explicit ``forced`` name) hands the source to
   that getter alone;
2. a URL whose scheme names a registered getter is taken verbatim;
3. otherwise every getter's detector is tried in registry order; the file
   getter comes last and resolves relative paths against ``pwd``.
"""

from __future__ import annotations

from loguru import logger

from ..core.exceptions import DetectionError
from ..core.types import Address
from ..utils.urls import split_forced, url_scheme
from .registry import GetterRegistry, get_default_registry


class DetectionChain:
    """Ordered detection over a getter registry.

    Example:
        chain = DetectionChain(get_default_registry())
        address = chain.resolve("./modules/foo", pwd="/work")
        str(address)  # 'file:///work/modules/foo'
    """

    def __init__(self, registry: GetterRegistry | None = None) -> None:
        self._registry = registry

    @property
    def registry(self) -> GetterRegistry:
        if self._registry is None:
            return get_default_registry()
        return self._registry

    def resolve(self, raw: str, pwd: str = "", forced: str = "") -> Address | None:
        """Resolve raw into an address.

        Args:
            raw: Source string, optionally prefixed with ``getter::``.
            pwd: Working directory for relative paths.
            forced: Name of the getter that must handle raw. Takes precedence
                over a ``getter::`` prefix in raw.

        Returns:
            The resolved Address, or None if raw is empty.

        Raises:
            UnknownGetterError: If the forced getter is not registered.
            DetectionError: If no getter accepts raw.
            SrcFetchError: Any error a getter raises while detecting.
        """
        if not raw:
            return None

        prefix, src = split_forced(raw)
        forced = forced or prefix

        registry = self.registry
        if forced:
            # Only the forced getter is consulted
            getter = registry.get(forced, raw)
            url = getter.detect(src, pwd, forced)
            if url is None:
                raise DetectionError(raw)
            return self._found(raw, Address(getter.name, url))

        scheme = url_scheme(src)
        if scheme and registry.is_registered(scheme):
            return self._found(raw, Address(scheme, src))

        for getter in registry:
            url = getter.detect(src, pwd)
            if url is not None:
                return self._found(raw, Address(getter.name, url))

        raise DetectionError(raw)

    @staticmethod
    def _found(raw: str, address: Address) -> Address:
        logger.debug(f"Detected {raw!r} as {address}")
        return address


def detect(
    raw: str,
    pwd: str = "",
    forced: str = "",
    registry: GetterRegistry | None = None,
) -> Address | None:
    """Resolve raw with the given (or default) registry.

    See DetectionChain.resolve.
    """
    return DetectionChain(registry).resolve(raw, pwd, forced)

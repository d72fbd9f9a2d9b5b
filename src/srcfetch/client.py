"""Client tying detection, mode probing and retrieval together."""

from __future__ import annotations

from loguru import logger

from .core.cancel import CancellationToken
from .core.config import Config
from .core.exceptions import AddressError
from .core.types import Address, GetResult, Mode, Request
from .sources.base import Getter
from .sources.detect import DetectionChain
from .sources.registry import GetterRegistry, create_registry, get_default_registry


class Client:
    """Entry point for retrievals.

    Example:
        client = Client()
        result = client.fetch(Request(src="./modules/foo", dst="/tmp/foo", pwd="/work"))
        result.mode  # Mode.DIR
    """

    def __init__(
        self,
        registry: GetterRegistry | None = None,
        config: Config | None = None,
    ) -> None:
        """Initialize client.

        Args:
            registry: Getters to use. Defaults to the built-in getters, built
                from config when one is given, else the shared default registry.
            config: Configuration for the built-in getters.
        """
        if registry is None:
            registry = create_registry(config) if config is not None else get_default_registry()
        self._registry = registry
        self._chain = DetectionChain(registry)

    @property
    def registry(self) -> GetterRegistry:
        return self._registry

    def detect(self, raw: str, pwd: str = "", forced: str = "") -> Address | None:
        """Resolve a raw source string. See DetectionChain.resolve."""
        return self._chain.resolve(raw, pwd, forced)

    def mode(self, address: Address | str) -> Mode:
        """Probe whether address names a file or a directory."""
        address = self._coerce(address)
        return self._getter(address).mode(address)

    def get(self, request: Request, token: CancellationToken | None = None) -> None:
        """Retrieve a directory into request.dst."""
        address = self._resolve(request)
        token = token or CancellationToken()
        logger.info(f"Retrieving directory {address} -> {request.dst}")
        self._getter(address).get(request, token)

    def get_file(self, request: Request, token: CancellationToken | None = None) -> None:
        """Retrieve a single file into request.dst."""
        address = self._resolve(request)
        token = token or CancellationToken()
        logger.info(f"Retrieving file {address} -> {request.dst}")
        self._getter(address).get_file(request, token)

    def fetch(self, request: Request, token: CancellationToken | None = None) -> GetResult:
        """Detect, probe and retrieve in one call.

        Returns:
            GetResult with the address, the probed mode and the final
            destination (which differs from the requested one for in-place
            retrievals).
        """
        address = self._resolve(request)
        mode = self.mode(address)
        if mode is Mode.DIR:
            self.get(request, token)
        else:
            self.get_file(request, token)
        return GetResult(address=address, mode=mode, dst=request.dst)

    def _resolve(self, request: Request) -> Address:
        if request.address is None:
            address = self.detect(request.src, request.pwd, request.forced)
            if address is None:
                raise AddressError(request.src, "empty source")
            request.address = address
        return request.address

    @staticmethod
    def _coerce(address: Address | str) -> Address:
        if isinstance(address, Address):
            return address
        return Address.parse(address)

    def _getter(self, address: Address) -> Getter:
        return self._registry.get(address.getter, str(address))

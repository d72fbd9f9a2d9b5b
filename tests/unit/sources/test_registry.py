"""Tests for GetterRegistry."""

import pytest

from srcfetch.core.config import Config
from srcfetch.sources import (
    BaseGetter,
    FileGetter,
    Getter,
    GetterRegistry,
    HgGetter,
    RegistryError,
    S3Getter,
    UnknownGetterError,
    create_registry,
    get_default_registry,
    reset_default_registry,
)


class MockGetter(BaseGetter):
    """Mock getter for testing."""

    def __init__(self, name: str):
        super().__init__()
        self.name = name

    def mode(self, address):
        raise NotImplementedError

    def get(self, request, token):
        raise NotImplementedError

    def get_file(self, request, token):
        raise NotImplementedError


class TestGetterRegistry:
    """Tests for GetterRegistry."""

    def test_register_and_get(self):
        """Can register a getter and look it up by name."""
        registry = GetterRegistry()
        getter = MockGetter("mock")
        registry.register(getter)

        assert registry.get("mock") is getter

    def test_names_case_insensitive(self):
        """Getter names are case-insensitive."""
        registry = GetterRegistry()
        getter = MockGetter("MOCK")
        registry.register(getter)

        assert registry.get("mock") is getter
        assert registry.is_registered("Mock")

    def test_register_duplicate_raises(self):
        """Registering a duplicate name raises error."""
        registry = GetterRegistry()
        registry.register(MockGetter("mock"))

        with pytest.raises(RegistryError, match="already registered"):
            registry.register(MockGetter("mock"))

    def test_register_override_keeps_position(self):
        """Overriding replaces the getter without changing detection order."""
        registry = GetterRegistry()
        registry.register(MockGetter("a"))
        registry.register(MockGetter("b"))
        replacement = MockGetter("a")

        registry.register(replacement, override=True)

        assert registry.names() == ["a", "b"]
        assert registry.get("a") is replacement

    def test_register_nameless_raises(self):
        """A getter without a name cannot be registered."""
        with pytest.raises(RegistryError, match="no name"):
            GetterRegistry().register(MockGetter(""))

    def test_unregister(self):
        """Can unregister a getter."""
        registry = GetterRegistry()
        registry.register(MockGetter("mock"))

        assert registry.unregister("mock") is True
        assert registry.unregister("mock") is False  # Already gone
        assert not registry.is_registered("mock")

    def test_get_unknown_raises(self):
        """Looking up an unregistered name raises UnknownGetterError."""
        registry = GetterRegistry()

        with pytest.raises(UnknownGetterError, match="ftp") as exc_info:
            registry.get("ftp", "ftp::example.com/file")

        assert exc_info.value.name == "ftp"
        assert exc_info.value.address == "ftp::example.com/file"

    def test_iteration_order(self):
        """Iteration follows registration order."""
        registry = GetterRegistry()
        for name in ("c", "a", "b"):
            registry.register(MockGetter(name))

        assert [g.name for g in registry] == ["c", "a", "b"]
        assert len(registry) == 3

    def test_getters_satisfy_protocol(self):
        """Built-in getters satisfy the Getter protocol."""
        for getter in create_registry():
            assert isinstance(getter, Getter)


class TestDefaultRegistry:
    """Tests for the built-in registry."""

    def test_detection_order(self):
        """Catch-all file getter comes last."""
        registry = create_registry()

        assert registry.names() == ["hg", "s3", "file"]
        assert isinstance(registry.get("hg"), HgGetter)
        assert isinstance(registry.get("s3"), S3Getter)
        assert isinstance(registry.get("file"), FileGetter)

    def test_config_is_shared(self):
        """All built-in getters receive the given config."""
        config = Config()
        registry = create_registry(config)

        assert all(getter.config is config for getter in registry)

    def test_default_is_singleton(self):
        """get_default_registry returns the same instance until reset."""
        first = get_default_registry()

        assert get_default_registry() is first

        reset_default_registry()
        assert get_default_registry() is not first

    def test_default_reads_environment(self, monkeypatch):
        """The default registry is configured from the environment."""
        monkeypatch.setenv("SRCFETCH_HG_BINARY", "/opt/hg/bin/hg")

        assert get_default_registry().get("hg").config.hg.binary == "/opt/hg/bin/hg"

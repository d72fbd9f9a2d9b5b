"""Custom exceptions for srcfetch."""


class SrcFetchError(Exception):
    """Base exception for all srcfetch errors."""

    pass


# =============================================================================
# Malformed input
# =============================================================================


class AddressError(SrcFetchError):
    """Address could not be parsed or is not valid for its backend."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid address {address!r}: {reason}")


class MissingPwdError(AddressError):
    """A relative path was given without a working directory to resolve it."""

    def __init__(self, address: str):
        super().__init__(address, "relative paths require a pwd")


class DetectionError(SrcFetchError):
    """No registered getter claimed the source string."""

    def __init__(self, src: str):
        self.src = src
        super().__init__(f"Invalid source string: {src!r} (no getter accepted it)")


# =============================================================================
# Precondition violations
# =============================================================================


class SourceNotFoundError(SrcFetchError):
    """The source path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Source path does not exist: {path}")


class SourceKindError(SrcFetchError):
    """The source exists but is a file where a directory is needed, or vice versa."""

    def __init__(self, path: str, expected: str):
        self.path = path
        self.expected = expected
        super().__init__(f"Source path must be a {expected}: {path}")


class DestinationConflictError(SrcFetchError):
    """The destination is occupied by an entry that may not be replaced."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Destination {path}: {reason}")


# =============================================================================
# Environment
# =============================================================================


class ToolNotFoundError(SrcFetchError):
    """A required external executable is not on the PATH."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"{tool} must be available and on the PATH")


# =============================================================================
# Transport
# =============================================================================


class TransportError(SrcFetchError):
    """Listing or fetching from a remote backend failed."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Failed to retrieve {address}: {reason}")


class CommandError(TransportError):
    """An external command exited with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        command = " ".join(args)
        super().__init__(
            command,
            f"command exited with status {returncode}: {stderr.strip()}",
        )


# =============================================================================
# Cancellation
# =============================================================================


class CancelledError(SrcFetchError):
    """The cancellation token fired while a retrieval was in progress."""

    def __init__(self, operation: str = "retrieval"):
        self.operation = operation
        super().__init__(f"{operation} cancelled")

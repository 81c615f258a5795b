"""Exceptions raised by the clipboard port, the image codec and the monitor."""


class ClipBoxError(Exception):
    """Base exception for ClipBox."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f"{base_msg} (Caused by: {type(self.original_error).__name__}: {self.original_error})"
        return base_msg


class PortError(ClipBoxError):
    """Base class for clipboard access errors."""


class PortUnavailableError(PortError):
    """The platform, or the utility it needs, cannot reach the clipboard."""


class PortExecutionError(PortError):
    """A clipboard call ran and failed. ``detail`` holds the captured diagnostic text."""

    def __init__(self, message: str, detail: str = "", original_error: Exception | None = None):
        if detail:
            message = f"{message}: {detail.strip()}"
        super().__init__(message, original_error)
        self.detail = detail


class PortNotFoundError(PortError):
    """A file handed to the clipboard does not exist."""

    def __init__(self, path):
        super().__init__(f"Image file does not exist: {path}")
        self.path = str(path)


class CodecError(ClipBoxError):
    """Base class for image transfer errors."""


class MalformedInputError(CodecError):
    """The data URI has no comma-separated payload."""


class InvalidEncodingError(CodecError):
    """The data URI payload is not valid Base64."""


class CodecIOError(CodecError):
    """Reading or writing an image file failed."""


class MonitorError(ClipBoxError):
    """Base class for monitor lifecycle errors."""


class MonitorAlreadyRunningError(MonitorError):
    """start() was called on a monitor that is already polling."""

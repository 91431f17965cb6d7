class TreePushError(Exception):
    """Base class for every failure that aborts an upload."""


class LocalIOError(TreePushError):
    """Raised when the local root or one of its files cannot be read."""

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(message)

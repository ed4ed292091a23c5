"""Error kinds raised by the budget engine and its stores"""


class ValidationError(ValueError):
    """Input rejected before any write."""
    pass


class NotFoundError(ValidationError):
    """The record an update refers to does not exist."""
    pass


class StorageError(RuntimeError):
    """Read/write failure reported by a storage backend."""
    pass

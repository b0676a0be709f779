class DuplicateInsertError(Exception):
    """Raised when a write violates a unique index."""

    pass


class DocumentNotFoundError(Exception):
    """Raised when no document matches the given identifier."""

    pass

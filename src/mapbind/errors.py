class KeyNotFoundError(KeyError):
    """Raised when a key lookup or removal targets a key that is not stored.

    Subclasses ``KeyError`` so bound maps behave like ``dict`` for callers
    that only know about the builtin exception.
    """


class BindingError(RuntimeError):
    """Raised when a map type cannot be bound as requested."""


class BindingConfigError(Exception):
    """Raised when a binding configuration fails validation.

    The message lists every problem found, one per line.
    """

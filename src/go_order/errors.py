"""Errors raised while ordering a source file."""


class GoOrderError(ValueError):
    """Base class for every failure of a sort-and-emit run."""


class SourceParseError(GoOrderError):
    """The front-end could not turn the source into declarations and comments."""


class UnknownDeclarationKindError(GoOrderError):
    """A declaration has no place in the kind priority table."""


class MalformedReceiverError(GoOrderError):
    """A method receiver has a shape that does not name a type."""


class MalformedSpanError(GoOrderError):
    """Declaration spans are empty, out of range or overlapping."""

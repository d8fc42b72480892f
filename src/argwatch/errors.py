"""Exceptions raised by argwatch."""


class ArgwatchError(Exception):
    """Base class for argwatch errors."""
    pass


class EmptyInputError(ArgwatchError):
    """Raised when the (possibly filtered) function catalog is empty."""
    pass


class InvariantViolationError(ArgwatchError):
    """Raised when the usage matrix and the catalog disagree."""
    pass


class UnknownFunctionError(ArgwatchError, LookupError):
    """Raised when a signature source is asked about a function it never listed."""
    pass


class ReportFormatError(ArgwatchError):
    """Raised when a saved report cannot be loaded."""
    pass

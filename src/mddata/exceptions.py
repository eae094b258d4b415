"""Custom exceptions for mddata."""


class MddataError(Exception):
    """Base exception for mddata operations."""


class DocumentLoadError(MddataError):
    """A document source could not be read."""


class TypeCycleError(MddataError):
    """A chain of typed records refers back to itself."""


class UnknownTypeError(MddataError, KeyError):
    """A typed record names a type that is not defined."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""

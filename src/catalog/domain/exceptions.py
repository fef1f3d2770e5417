"""Domain-level exceptions.

Business rule violations are subclasses of DomainException so the HTTP
and CLI layers can catch them uniformly and pick their own
representation. Storage failures are a separate hierarchy: they never
leave the persistence adapter.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A field value or request argument is invalid."""


class NotFoundError(DomainException):
    """No product has the requested ID."""


class DuplicateCodeError(DomainException):
    """Another product already uses the requested code."""


class StorageError(Exception):
    """Base class for backing store failures."""


class StorageReadError(StorageError):
    """The backing store could not be read or decoded."""


class StorageWriteError(StorageError):
    """The backing store could not be rewritten."""

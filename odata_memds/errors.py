"""Exceptions raised by the data source and mapped to HTTP responses by the API."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


class ODataError(Exception):
    """Base exception for data source errors."""

    pass


class NotFoundError(ODataError):
    """Raised when a requested entity or entity set does not exist."""

    pass


class ODataNotImplementedError(ODataError):
    """Raised for operations the in-memory data source does not support (function imports, relation and binary writes)."""

    pass


class EntityValidationError(ODataError):
    """Raised when an incoming entity payload or key predicate cannot be converted to the domain type."""

    pass


class ODataRuntimeError(ODataError):
    """Raised for faults in the data source itself (missing store registration, reflective access failure)."""

    pass


class AnnotationRuntimeError(ODataRuntimeError):
    """Raised when a domain class is not annotated the way an operation requires."""

    pass


class DataStoreError(ODataRuntimeError):
    """Raised when a store cannot fulfil a write, e.g. keys of an unsupported type must be generated."""

    pass

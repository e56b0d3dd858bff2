"""phrasal - phrase-based assertions for Python tests."""

from .assertions import (
    AssertionFailure,
    AssertionMetadata,
    ValidationRequest,
    create_assertion,
    create_async_assertion,
)
from .context import CheckRecord, check_records_collector
from .dispatch import CheckKit, bootstrap, compose, fail
from .errors import (
    AssertionConfigurationError,
    AssertionFailedError,
    AssertionImplementationError,
    FailAssertionError,
    InvalidMetadataError,
    NegatedAssertionError,
    PhrasalError,
    UnexpectedAsyncError,
    UnknownAssertionError,
)
from .validators import Validator, ValidationResult, satisfies, schema, validator
from .version import __version__


check, check_async = bootstrap()
extend_with = check.extend_with


__all__ = [
    # Dispatch
    "check",
    "check_async",
    "extend_with",
    "fail",
    "compose",
    "bootstrap",
    "CheckKit",
    # Registration
    "create_assertion",
    "create_async_assertion",
    "AssertionFailure",
    "AssertionMetadata",
    "ValidationRequest",
    # Validators
    "Validator",
    "ValidationResult",
    "satisfies",
    "schema",
    "validator",
    # Context
    "CheckRecord",
    "check_records_collector",
    # Errors
    "PhrasalError",
    "AssertionConfigurationError",
    "InvalidMetadataError",
    "UnknownAssertionError",
    "AssertionImplementationError",
    "UnexpectedAsyncError",
    "AssertionFailedError",
    "NegatedAssertionError",
    "FailAssertionError",
]

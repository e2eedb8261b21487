"""
errors/ - Error Taxonomy
========================
Every failure raised by this project derives from PlatformError.
Each error carries a stable code, a category, a context map,
an HTTP status hint and a retryable flag.
"""

from errors.base import ErrorCategory, PlatformError
from errors.categories import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConfigurationParseError,
    FlowError,
    FlowNotFoundError,
    FlowStepError,
    FlowTimeoutError,
    InternalSystemError,
    InvalidConfigurationValueError,
    InvalidFlowStateError,
    MappingError,
    MissingConfigurationError,
    SchemaValidationError,
    ScriptError,
    SecurityError,
    TemplateError,
    TransformationError,
    TypeConversionError,
    ValidationError,
)
from errors.data_access import (
    DataAccessError,
    EntityNotFoundError,
    ForeignKeyViolationError,
    PoolExhaustedError,
    StatementExecutionError,
    TransactionError,
    UniqueConstraintError,
    translate_driver_error,
)

__all__ = [
    "ErrorCategory",
    "PlatformError",
    "ValidationError",
    "SecurityError",
    "AuthenticationError",
    "AuthorizationError",
    "FlowError",
    "FlowNotFoundError",
    "InvalidFlowStateError",
    "FlowStepError",
    "FlowTimeoutError",
    "TransformationError",
    "MappingError",
    "TypeConversionError",
    "ScriptError",
    "TemplateError",
    "SchemaValidationError",
    "ConfigurationError",
    "MissingConfigurationError",
    "InvalidConfigurationValueError",
    "ConfigurationParseError",
    "DataAccessError",
    "EntityNotFoundError",
    "UniqueConstraintError",
    "ForeignKeyViolationError",
    "StatementExecutionError",
    "TransactionError",
    "PoolExhaustedError",
    "InternalSystemError",
    "translate_driver_error",
]

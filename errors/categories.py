"""
errors/categories.py
--------------------
Non-persistence error categories: validation, security, flow,
transformation, configuration and system.
"""

from http import HTTPStatus

from errors.base import ErrorCategory, PlatformError


# ── Validation ───────────────────────────────────────────

class ValidationError(PlatformError):
    category = ErrorCategory.VALIDATION
    default_code = "VALIDATION_ERROR"
    http_status = HTTPStatus.BAD_REQUEST


# ── Security ─────────────────────────────────────────────

class SecurityError(PlatformError):
    category = ErrorCategory.SECURITY
    default_code = "SECURITY_ERROR"
    http_status = HTTPStatus.FORBIDDEN


class AuthenticationError(SecurityError):
    default_code = "AUTHENTICATION_FAILED"
    http_status = HTTPStatus.UNAUTHORIZED


class AuthorizationError(SecurityError):
    default_code = "ACCESS_DENIED"
    http_status = HTTPStatus.FORBIDDEN


# ── Flow ─────────────────────────────────────────────────

class FlowError(PlatformError):
    category = ErrorCategory.FLOW
    default_code = "FLOW_ERROR"


class FlowNotFoundError(FlowError):
    default_code = "FLOW_NOT_FOUND"
    http_status = HTTPStatus.NOT_FOUND


class InvalidFlowStateError(FlowError):
    default_code = "FLOW_INVALID_STATE"
    http_status = HTTPStatus.CONFLICT


class FlowStepError(FlowError):
    default_code = "FLOW_STEP_FAILED"


class FlowTimeoutError(FlowError):
    default_code = "FLOW_TIMEOUT"
    http_status = HTTPStatus.GATEWAY_TIMEOUT
    default_retryable = True


# ── Transformation ───────────────────────────────────────

class TransformationError(PlatformError):
    category = ErrorCategory.TRANSFORMATION
    default_code = "TRANSFORMATION_ERROR"


class MappingError(TransformationError):
    """A stored row could not be turned into an in-memory value."""
    default_code = "MAPPING_FAILED"


class TypeConversionError(TransformationError):
    default_code = "TYPE_CONVERSION_FAILED"


class ScriptError(TransformationError):
    default_code = "SCRIPT_FAILED"


class TemplateError(TransformationError):
    default_code = "TEMPLATE_FAILED"


class SchemaValidationError(TransformationError):
    default_code = "SCHEMA_VALIDATION_FAILED"
    http_status = HTTPStatus.UNPROCESSABLE_ENTITY


# ── Configuration ────────────────────────────────────────

class ConfigurationError(PlatformError):
    category = ErrorCategory.CONFIGURATION
    default_code = "CONFIGURATION_ERROR"


class MissingConfigurationError(ConfigurationError):
    default_code = "CONFIGURATION_MISSING"


class InvalidConfigurationValueError(ConfigurationError):
    default_code = "CONFIGURATION_INVALID_VALUE"


class ConfigurationParseError(ConfigurationError):
    default_code = "CONFIGURATION_PARSE_FAILED"


# ── System ───────────────────────────────────────────────

class InternalSystemError(PlatformError):
    category = ErrorCategory.SYSTEM
    default_code = "SYSTEM_ERROR"

"""Canonical logging field names for cross-component consistency."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Request correlation fields.
TRACE_ID = "trace_id"
PRINCIPAL = "principal"
TENANT_ID = "tenant_id"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
ERROR_CATEGORY = "error_category"
ERROR_CODE = "error_code"
RETRYABLE = "retryable"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"

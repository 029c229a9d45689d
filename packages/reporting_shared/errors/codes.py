"""Shared error code constants.

Codes are stable machine-readable identifiers. Component-specific codes live
next to the component that raises them.
"""

# Validation
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
UNKNOWN_SCOPE = "UNKNOWN_SCOPE"
UNKNOWN_ATTRIBUTE = "UNKNOWN_ATTRIBUTE"
UNSUPPORTED_FILTER = "UNSUPPORTED_FILTER"

# Data integrity
DATA_INTEGRITY = "DATA_INTEGRITY"
MALFORMED_FIELD_KEY = "MALFORMED_FIELD_KEY"
MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
MISSING_MAPPING = "MISSING_MAPPING"
FIELD_KEY_COLLISION = "FIELD_KEY_COLLISION"

# Dependency / external system
DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
DEPENDENCY_TIMEOUT = "DEPENDENCY_TIMEOUT"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"
DEADLINE_EXCEEDED = "DEADLINE_EXCEEDED"

# Internal
INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"

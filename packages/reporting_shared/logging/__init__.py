"""Public logging API for device reporting components.

Wraps Python's ``logging`` module with stdout defaults and structured context
propagation.
"""

from .config import configure_logging, get_logger
from .context import bind_context, clear_context, get_context, log_context
from .public_api import public_api_logged

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_context",
    "get_logger",
    "log_context",
    "public_api_logged",
]

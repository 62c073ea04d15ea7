"""
Utilities module - Common helpers for API responses and exceptions.
"""

from common.utils.responses import success_response, error_response
from common.utils.exceptions import (
    APIException,
    UnauthorizedException,
    NotFoundException,
    ValidationException,
    ServiceUnavailableException,
)

__all__ = [
    "success_response",
    "error_response",
    "APIException",
    "UnauthorizedException",
    "NotFoundException",
    "ValidationException",
    "ServiceUnavailableException",
]

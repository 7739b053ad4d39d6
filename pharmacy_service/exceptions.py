"""
Error types raised by the catalog and cart layers.

Lookups that find nothing return ``None`` instead of raising; only bad input
and store failures are exceptions.
"""

from fastapi import status


class PharmacyError(Exception):
    """Base class for service errors"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(PharmacyError):
    """Input rejected before it reaches the store (400)"""

    status_code = status.HTTP_400_BAD_REQUEST


class StoreUnavailable(PharmacyError):
    """Connection or query failure in the relational store (500)"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def require_positive_int(value, name: str) -> int:
    # bool is an int subclass; True must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer")
    return value


def require_non_negative_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer")
    return value

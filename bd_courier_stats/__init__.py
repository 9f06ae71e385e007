"""Customer delivery stats from Bangladeshi couriers (Pathao, Steadfast, RedX)."""

from .config import ConfigManager
from .exceptions import ApiError, AuthError, ConfigError, CourierStatsError, ValidationError
from .phone import (
    format_phone,
    is_valid_phone,
    phone_validation_error,
    phone_with_country_code,
    sanitize_phone,
    validate_phone,
)
from .stats import CourierCustomerStats

__all__ = [
    "ApiError",
    "AuthError",
    "ConfigError",
    "ConfigManager",
    "CourierCustomerStats",
    "CourierStatsError",
    "ValidationError",
    "format_phone",
    "is_valid_phone",
    "phone_validation_error",
    "phone_with_country_code",
    "sanitize_phone",
    "validate_phone",
]

"""Exceptions raised by the courier clients."""


class CourierStatsError(Exception):
    """Base class for all courier stats errors."""


class ValidationError(CourierStatsError, ValueError):
    """Phone number is malformed."""


class ConfigError(CourierStatsError, ValueError):
    """Required credentials are missing or have the wrong type."""


class AuthError(CourierStatsError):
    """Login or session establishment failed."""


class ApiError(CourierStatsError):
    """An authenticated call failed or returned an unexpected payload."""

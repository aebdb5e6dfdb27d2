"""Project-wide exception types."""


class AssetPriceSimError(Exception):
    """Base exception for all simulator errors."""


class ConfigError(AssetPriceSimError):
    """Raised when configuration is missing or malformed."""


class ConfigValidationError(ConfigError):
    """Raised when validation fails for supplied configuration."""


class InvalidStateError(AssetPriceSimError):
    """Raised when an operation does not match the configured output mode."""


class OutOfRangeError(AssetPriceSimError, IndexError):
    """Raised when a cursor position falls outside the materialized sequence."""


class StorageError(AssetPriceSimError):
    """Raised when persisted series or assets cannot be read or written."""

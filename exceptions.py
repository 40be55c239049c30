"""Custom exception classes for hammer throw analysis."""

from __future__ import annotations

from typing import Optional


class HammerAnalysisError(Exception):
    """Base exception for all hammer analysis errors."""

    pass


class InsufficientDataError(HammerAnalysisError):
    """Raised when a trajectory is too short for the requested estimate."""

    def __init__(self, message: str, required: Optional[int] = None, available: Optional[int] = None):
        self.required = required
        self.available = available
        super().__init__(message)


class DegenerateFitError(HammerAnalysisError):
    """Raised when a regression window has zero time variance."""

    pass


class MissingAnchorError(HammerAnalysisError):
    """Raised when the release or landing point could not be detected."""

    def __init__(self, message: str, anchor: Optional[str] = None):
        self.anchor = anchor
        super().__init__(message)


class CalibrationError(HammerAnalysisError):
    """Base exception for calibration-related errors."""

    pass


class InvalidCircleError(CalibrationError):
    """Raised when a circle detection cannot produce a scale factor."""

    pass


class ConfigError(HammerAnalysisError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigError(ConfigError):
    """Raised when configuration file is invalid or corrupted."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration fails schema validation."""

    def __init__(self, message: str, validation_errors: Optional[list] = None):
        self.validation_errors = validation_errors or []
        super().__init__(message)

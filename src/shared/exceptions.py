"""
Custom exceptions for the range slider.

This module provides domain-specific exceptions for clearer error messages
when callers break the preconditions of the value model.

Clean Architecture Note:
- This file belongs to the Shared layer (cross-cutting concerns)
- Can be imported by any layer (domain, rangeslider)
"""


class RangeSliderError(Exception):
    """Base exception for all range slider errors."""

    pass


class PreconditionError(RangeSliderError, ValueError):
    """Raised when a caller violates a precondition of the value model.

    Out-of-range values are never reported this way; they are clamped.
    This error is reserved for programmer errors such as a non-positive
    step or an inverted percent window.
    """

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        value: object | None = None,
    ):
        """
        Initialize PreconditionError.

        Parameters
        ----------
        message : str
            Error message
        field_name : str | None
            Name of the offending argument or attribute
        value : object | None
            The rejected value
        """
        self.field_name = field_name
        self.value = value

        full_message = message
        if field_name:
            full_message = f"{full_message} (field: {field_name}"
            if value is not None:
                full_message = f"{full_message}, got: {value!r}"
            full_message = f"{full_message})"

        super().__init__(full_message)


class ScalingLookupError(PreconditionError):
    """Raised when a piecewise scaling has no segment containing a value."""

    def __init__(self, message: str, value: float, representation: str):
        """
        Initialize ScalingLookupError.

        Parameters
        ----------
        message : str
            Error message
        value : float
            The value that matched no segment
        representation : str
            Domain that was searched ('internal' or 'external')
        """
        self.representation = representation
        super().__init__(f"{message} ({representation} value: {value})")
        self.value = value


class ConfigError(RangeSliderError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        field_name: str | None = None,
    ):
        """
        Initialize ConfigError.

        Parameters
        ----------
        message : str
            Error message
        config_path : str | None
            Path to the config file
        field_name : str | None
            Name of the invalid/missing config field
        """
        self.config_path = config_path
        self.field_name = field_name

        full_message = message
        if field_name:
            full_message = f"{full_message} (field: {field_name})"
        if config_path:
            full_message = f"{full_message} (config: {config_path})"

        super().__init__(full_message)


__all__ = [
    "ConfigError",
    "PreconditionError",
    "RangeSliderError",
    "ScalingLookupError",
]

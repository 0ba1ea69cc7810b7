"""
Availability Domain Errors

Exceptional failures of the availability engine. Ordinary invalid user
selections are never raised; they are returned as ValidationResult values.
"""


class AvailabilityError(Exception):
    """Base class for errors raised by the availability engine."""


class MalformedDateError(AvailabilityError, ValueError):
    """Raised when a value cannot be interpreted as a calendar date.

    This signals corrupt data coming from the unavailable-date source or a
    caller, not a user mistake.
    """

    def __init__(self, value, message: str | None = None):
        self.value = value
        super().__init__(message or f"Cannot interpret {value!r} as a calendar date")


class PricingContractError(AvailabilityError, ValueError):
    """Raised when the price calculator is called with arguments that the
    validators upstream should have rejected (zero nights, non-positive rate)."""

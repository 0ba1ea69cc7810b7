"""
Availability Domain

Pure booking-window engine with no framework dependencies:
- calendar: canonical date keys and AvailabilityIndex
- booking_window: validation rules, disabled-date policy, selection state
- pricing: nightly, monthly and daily quotes with fee breakdown
- long_stay: whole-month selections and month bounds
"""

from apps.availability.domain.booking_window import (
    BookingSelection,
    BookingWindow,
    BookingWindowValidator,
    InvalidReason,
    SelectionState,
    ValidationResult,
)
from apps.availability.domain.calendar import AvailabilityIndex, canonical_date_key, to_calendar_date
from apps.availability.domain.errors import AvailabilityError, MalformedDateError, PricingContractError
from apps.availability.domain.long_stay import LongStayValidator
from apps.availability.domain.pricing import BillingUnit, PriceBreakdown, PriceCalculator, PriceQuote

__all__ = [
    'AvailabilityError',
    'AvailabilityIndex',
    'BillingUnit',
    'BookingSelection',
    'BookingWindow',
    'BookingWindowValidator',
    'InvalidReason',
    'LongStayValidator',
    'MalformedDateError',
    'PriceBreakdown',
    'PriceCalculator',
    'PriceQuote',
    'PricingContractError',
    'SelectionState',
    'ValidationResult',
    'canonical_date_key',
    'to_calendar_date',
]

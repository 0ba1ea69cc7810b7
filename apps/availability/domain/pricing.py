"""
Booking Price Calculation

Turns validated windows into price quotes:
- PriceQuote: nights/months/days x rate, total in whole currency units
- PriceBreakdown: quote plus discount, service fee, VAT on the fee and cleaning fee
- PriceCalculator: builds both

Amounts are integral currency units (FCFA has no subdivision). Rounding is
round-half-up and happens once, on the final total, never per line item.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum

from shared.domain.base import ValueObject
from apps.availability.domain.calendar import DateLike, to_calendar_date
from apps.availability.domain.errors import PricingContractError

DEFAULT_SERVICE_FEE_RATE = Decimal('0.12')
DEFAULT_VAT_RATE = Decimal('0.18')

_WHOLE_UNIT = Decimal('1')


def round_half_up(amount: Decimal) -> Decimal:
    """Round to a whole currency unit, halves away from zero"""
    return Decimal(amount).quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)


def to_decimal(value, name: str = 'amount') -> Decimal:
    """Convert int/float/str/Decimal to Decimal without binary float noise"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise PricingContractError(f"{name} must be a number, got {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise PricingContractError(f"{name} must be a number, got {value!r}") from exc


class BillingUnit(Enum):
    """What a quote's quantity counts"""
    NIGHT = 'night'    # property stays
    MONTH = 'month'    # long stays
    DAY = 'day'        # vehicle rentals


@dataclass(frozen=True)
class PriceQuote(ValueObject):
    """
    Price quote value object

    quantity counts billing units (nights, months or days) charged at rate.
    """
    unit: BillingUnit
    quantity: int
    rate: Decimal
    total: Decimal

    @property
    def nights(self) -> int | None:
        return self.quantity if self.unit == BillingUnit.NIGHT else None

    @property
    def months(self) -> int | None:
        return self.quantity if self.unit == BillingUnit.MONTH else None

    @property
    def days(self) -> int | None:
        return self.quantity if self.unit == BillingUnit.DAY else None

    @property
    def rate_per_night(self) -> Decimal | None:
        return self.rate if self.unit == BillingUnit.NIGHT else None

    @property
    def rate_per_month(self) -> Decimal | None:
        return self.rate if self.unit == BillingUnit.MONTH else None

    @property
    def rate_per_day(self) -> Decimal | None:
        return self.rate if self.unit == BillingUnit.DAY else None


@dataclass(frozen=True)
class PriceBreakdown(ValueObject):
    """
    Full price breakdown shown before booking

    base_amount = max(quote.total - discount_amount, 0)
    service_fee_amount = base_amount * service_fee_rate
    vat_on_service = service_fee_amount * vat_rate
    total = round_half_up(base + service fee + VAT + cleaning fee)
    """
    quote: PriceQuote
    discount_amount: Decimal
    base_amount: Decimal
    service_fee_rate: Decimal
    service_fee_amount: Decimal
    vat_rate: Decimal
    vat_on_service: Decimal
    cleaning_fee: Decimal
    total: Decimal


class PriceCalculator:
    """
    Price calculator for nightly, monthly and daily rentals

    Stateless apart from the fee policy it was built with; calling any
    method twice with the same inputs gives an equal result.
    """

    def __init__(self, service_fee_rate=DEFAULT_SERVICE_FEE_RATE, vat_rate=DEFAULT_VAT_RATE):
        self.service_fee_rate = self._non_negative(service_fee_rate, 'service_fee_rate')
        self.vat_rate = self._non_negative(vat_rate, 'vat_rate')

    def quote_nightly(self, check_in: DateLike, check_out: DateLike, rate_per_night) -> PriceQuote:
        """
        Quote a nightly stay

        Nights are the whole-day difference between the calendar dates.

        Raises:
            PricingContractError: If nights <= 0 or the rate is not positive
        """
        nights = self._days_between(check_in, check_out)
        if nights <= 0:
            raise PricingContractError(
                f"Nightly quote requires at least one night, got {nights} "
                f"({check_in} -> {check_out})"
            )
        rate = self._positive(rate_per_night, 'rate_per_night')
        return PriceQuote(BillingUnit.NIGHT, nights, rate, round_half_up(nights * rate))

    def quote_monthly(self, months: int, rate_per_month) -> PriceQuote:
        """
        Quote a long stay

        Month bounds (min/max) are the long-stay validator's concern.

        Raises:
            PricingContractError: If months < 1 or the rate is not positive
        """
        if isinstance(months, bool) or not isinstance(months, int) or months < 1:
            raise PricingContractError(f"Monthly quote requires months >= 1, got {months!r}")
        rate = self._positive(rate_per_month, 'rate_per_month')
        return PriceQuote(BillingUnit.MONTH, months, rate, round_half_up(months * rate))

    def quote_daily(self, pickup: DateLike, return_date: DateLike, rate_per_day) -> PriceQuote:
        """
        Quote a vehicle rental

        A same-day (or reversed) return is charged as one day.
        """
        days = max(1, self._days_between(pickup, return_date))
        rate = self._positive(rate_per_day, 'rate_per_day')
        return PriceQuote(BillingUnit.DAY, days, rate, round_half_up(days * rate))

    def breakdown(self, quote: PriceQuote, cleaning_fee=0, discount_amount=0) -> PriceBreakdown:
        """Apply discount, service fee, VAT on the fee and cleaning fee to a quote"""
        cleaning = self._non_negative(cleaning_fee, 'cleaning_fee')
        discount = self._non_negative(discount_amount, 'discount_amount')

        base = max(quote.total - discount, Decimal('0'))
        service_fee = base * self.service_fee_rate
        vat = service_fee * self.vat_rate

        return PriceBreakdown(
            quote=quote,
            discount_amount=discount,
            base_amount=base,
            service_fee_rate=self.service_fee_rate,
            service_fee_amount=service_fee,
            vat_rate=self.vat_rate,
            vat_on_service=vat,
            cleaning_fee=cleaning,
            total=round_half_up(base + service_fee + vat + cleaning),
        )

    @staticmethod
    def _days_between(start: DateLike, end: DateLike) -> int:
        start_date: date = to_calendar_date(start)
        end_date: date = to_calendar_date(end)
        return (end_date - start_date).days

    @staticmethod
    def _positive(value, name: str) -> Decimal:
        amount = to_decimal(value, name)
        if not amount.is_finite() or amount <= 0:
            raise PricingContractError(f"{name} must be positive, got {value!r}")
        return amount

    @staticmethod
    def _non_negative(value, name: str) -> Decimal:
        amount = to_decimal(value, name)
        if not amount.is_finite() or amount < 0:
            raise PricingContractError(f"{name} cannot be negative, got {value!r}")
        return amount

"""Services connecting the availability engine to stored availability rows."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore

from .domain.calendar import AvailabilityIndex, to_calendar_date
from .domain.pricing import PriceCalculator
from .models import UnitAvailability

logger = logging.getLogger(__name__)


def load_unavailable_dates(unit_id: str) -> list[date]:
    """Return the dates on which the unit is explicitly unavailable."""

    return list(
        UnitAvailability.objects.filter(unit_id=unit_id, is_available=False).values_list("date", flat=True)
    )


def build_index_for_unit(unit_id: str) -> AvailabilityIndex:
    """Build a fresh availability index from the unit's stored rows.

    Indexes are never cached or patched: every call reflects the rows as
    they are now.
    """

    index = AvailabilityIndex.build(load_unavailable_dates(unit_id), unit_id=unit_id)
    logger.debug(f"Built availability index for unit {unit_id} with {len(index)} blocked dates")
    return index


@transaction.atomic
def block_dates(unit_id: str, dates: Iterable, reason: str = "") -> int:
    """Marks the given dates as unavailable for the unit."""

    count = 0
    for value in dates:
        UnitAvailability.objects.update_or_create(
            unit_id=unit_id,
            date=to_calendar_date(value),
            defaults={"is_available": False, "reason": reason},
        )
        count += 1
    logger.info(f"Blocked {count} dates for unit {unit_id} ({reason or 'no reason'})")
    return count


@transaction.atomic
def release_dates(unit_id: str, dates: Iterable) -> int:
    """Makes previously blocked dates available again."""

    keys = [to_calendar_date(value) for value in dates]
    updated = UnitAvailability.objects.filter(
        unit_id=unit_id,
        date__in=keys,
        is_available=False,
    ).update(is_available=True, reason="")
    logger.info(f"Released {updated} dates for unit {unit_id}")
    return updated


def get_price_calculator() -> PriceCalculator:
    """Price calculator configured with the platform fee policy."""

    return PriceCalculator(
        service_fee_rate=settings.BOOKING_SERVICE_FEE_RATE,
        vat_rate=settings.BOOKING_VAT_RATE,
    )

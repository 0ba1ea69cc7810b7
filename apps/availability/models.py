"""Availability models.

Per-day availability rows for bookable units (properties and vehicles).
Rows with ``is_available=False`` are the unit's unavailable dates; they are
loaded in bulk to build an ``AvailabilityIndex`` for each request.

``price_override`` is kept for the back office only: quotes are priced from
the rate sent with the request and never read it.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class UnitAvailability(models.Model):
    """Disponibilité d'une unité pour un jour donné."""

    unit_id = models.CharField(
        max_length=64,
        help_text=_("Identifiant du logement ou du véhicule."),
    )
    date = models.DateField()
    # NULL is treated as available, like a missing row
    is_available = models.BooleanField(null=True, default=True)
    price_override = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Prix spécifique pour ce jour."),
    )
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Disponibilité")
        verbose_name_plural = _("Disponibilités")
        ordering = ["unit_id", "date"]
        constraints = [
            models.UniqueConstraint(
                fields=["unit_id", "date"],
                name="unit_availability_unique_day",
            ),
        ]
        indexes = [
            models.Index(fields=["unit_id", "is_available"], name="unit_avail_unit_state_idx"),
        ]

    def __str__(self) -> str:
        state = "disponible" if self.is_available is not False else "indisponible"
        return f"{self.unit_id}: {self.date} ({state})"

"""Serializers for the availability API."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

from .domain.booking_window import ValidationResult
from .domain.pricing import PriceBreakdown

AMOUNT_FIELD_KWARGS = {"max_digits": 14, "decimal_places": 2}
# Computed amounts grow with quantity x rate; no digit cap on output
OUTPUT_AMOUNT_KWARGS = {"max_digits": None, "decimal_places": 2}


class CalendarQuerySerializer(serializers.Serializer):
    """Paramètres du calendrier public d'une unité."""

    start = serializers.DateField()
    end = serializers.DateField()
    check_in = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):  # type: ignore
        if attrs["end"] < attrs["start"]:
            raise serializers.ValidationError("La date de fin doit être après la date de début.")
        span = (attrs["end"] - attrs["start"]).days + 1
        if span > settings.BOOKING_CALENDAR_MAX_DAYS:
            raise serializers.ValidationError(
                f"La période demandée ne peut pas dépasser {settings.BOOKING_CALENDAR_MAX_DAYS} jours."
            )
        return attrs


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    blocked = serializers.BooleanField()
    check_in_disabled = serializers.BooleanField()
    check_out_disabled = serializers.BooleanField()


class BookingWindowSerializer(serializers.Serializer):
    """Sélection de dates à valider (les deux dates sont facultatives)."""

    check_in = serializers.DateField(required=False, allow_null=True)
    check_out = serializers.DateField(required=False, allow_null=True)


class NightlyQuoteSerializer(serializers.Serializer):
    """Demande de devis pour un séjour à la nuit."""

    check_in = serializers.DateField()
    check_out = serializers.DateField()
    rate_per_night = serializers.DecimalField(min_value=Decimal("0.01"), **AMOUNT_FIELD_KWARGS)
    cleaning_fee = serializers.DecimalField(min_value=Decimal("0"), default=Decimal("0"), **AMOUNT_FIELD_KWARGS)
    discount_amount = serializers.DecimalField(min_value=Decimal("0"), default=Decimal("0"), **AMOUNT_FIELD_KWARGS)


class LongStayQuoteSerializer(serializers.Serializer):
    """Demande de devis pour un séjour longue durée (au mois)."""

    check_in = serializers.DateField()
    check_out = serializers.DateField()
    rate_per_month = serializers.DecimalField(min_value=Decimal("0.01"), **AMOUNT_FIELD_KWARGS)
    min_months = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    max_months = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    cleaning_fee = serializers.DecimalField(min_value=Decimal("0"), default=Decimal("0"), **AMOUNT_FIELD_KWARGS)
    discount_amount = serializers.DecimalField(min_value=Decimal("0"), default=Decimal("0"), **AMOUNT_FIELD_KWARGS)


def validation_result_payload(result: ValidationResult) -> dict:
    """Public representation of a validation result."""

    return {
        "valid": result.is_valid,
        "reason": result.reason.value if result.reason else None,
        "detail": result.message,
        "nights": result.nights,
        "months": result.months,
    }


class PriceBreakdownSerializer(serializers.Serializer):
    """Détail du prix affiché avant réservation."""

    unit = serializers.CharField(source="quote.unit.value")
    quantity = serializers.IntegerField(source="quote.quantity")
    rate = serializers.DecimalField(source="quote.rate", **OUTPUT_AMOUNT_KWARGS)
    subtotal = serializers.DecimalField(source="quote.total", **OUTPUT_AMOUNT_KWARGS)
    discount_amount = serializers.DecimalField(**OUTPUT_AMOUNT_KWARGS)
    base_amount = serializers.DecimalField(**OUTPUT_AMOUNT_KWARGS)
    service_fee_rate = serializers.DecimalField(max_digits=None, decimal_places=4)
    service_fee_amount = serializers.DecimalField(**OUTPUT_AMOUNT_KWARGS)
    vat_rate = serializers.DecimalField(max_digits=None, decimal_places=4)
    vat_on_service = serializers.DecimalField(**OUTPUT_AMOUNT_KWARGS)
    cleaning_fee = serializers.DecimalField(**OUTPUT_AMOUNT_KWARGS)
    total = serializers.DecimalField(**OUTPUT_AMOUNT_KWARGS)
    currency = serializers.SerializerMethodField()

    def get_currency(self, obj: PriceBreakdown) -> str:
        return settings.BOOKING_CURRENCY


class VehicleQuoteSerializer(serializers.Serializer):
    """Demande de devis pour une location de véhicule à la journée."""

    pickup = serializers.DateField()
    return_date = serializers.DateField()
    rate_per_day = serializers.DecimalField(min_value=Decimal("0.01"), **AMOUNT_FIELD_KWARGS)


class PriceQuoteSerializer(serializers.Serializer):
    unit = serializers.CharField(source="unit.value")
    quantity = serializers.IntegerField()
    rate = serializers.DecimalField(**OUTPUT_AMOUNT_KWARGS)
    total = serializers.DecimalField(**OUTPUT_AMOUNT_KWARGS)
    currency = serializers.SerializerMethodField()

    def get_currency(self, obj) -> str:
        return settings.BOOKING_CURRENCY

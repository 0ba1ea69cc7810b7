"""Availability API views.

All endpoints are read-only computations over a freshly built
``AvailabilityIndex``; none of them changes stored data.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .domain.booking_window import BookingWindowValidator
from .domain.errors import MalformedDateError
from .domain.long_stay import LongStayValidator
from .serializers import (
    BookingWindowSerializer,
    CalendarDaySerializer,
    CalendarQuerySerializer,
    LongStayQuoteSerializer,
    NightlyQuoteSerializer,
    PriceBreakdownSerializer,
    PriceQuoteSerializer,
    VehicleQuoteSerializer,
    validation_result_payload,
)
from .services import build_index_for_unit, get_price_calculator

logger = logging.getLogger(__name__)


class AvailabilityAPIView(APIView):
    """Base view: public access, data-integrity failures reported separately."""

    permission_classes = [permissions.AllowAny]

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, MalformedDateError):
            logger.error(
                f"Corrupt availability data for unit {self.kwargs.get('unit_id')}: {exc}",
                exc_info=exc,
            )
            return Response(
                {"detail": "Le calendrier de disponibilité est momentanément indisponible."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return super().handle_exception(exc)


class UnitCalendarView(AvailabilityAPIView):
    """Calendrier jour par jour avec les dates désactivées à l'arrivée et au départ."""

    def get(self, request, unit_id):  # type: ignore
        query = CalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        validator = BookingWindowValidator(build_index_for_unit(unit_id))
        today = timezone.localdate()
        check_in = params.get("check_in")

        days = []
        for offset in range((params["end"] - params["start"]).days + 1):
            current = params["start"] + timedelta(days=offset)
            days.append(
                {
                    "date": current,
                    "blocked": validator.index.is_blocked(current),
                    "check_in_disabled": validator.is_check_in_disabled(current, today),
                    "check_out_disabled": validator.is_check_out_disabled(current, check_in, today),
                }
            )

        serializer = CalendarDaySerializer(days, many=True)
        return Response({"unit_id": unit_id, "dates": serializer.data})


class BookingWindowView(AvailabilityAPIView):
    """Valide une sélection arrivée/départ. Une sélection invalide n'est pas une erreur HTTP."""

    def post(self, request, unit_id):  # type: ignore
        serializer = BookingWindowSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        validator = BookingWindowValidator(build_index_for_unit(unit_id))
        result = validator.validate(
            serializer.validated_data.get("check_in"),
            serializer.validated_data.get("check_out"),
        )
        return Response(validation_result_payload(result))


class NightlyQuoteView(AvailabilityAPIView):
    """Devis pour un séjour à la nuit."""

    def post(self, request, unit_id):  # type: ignore
        serializer = NightlyQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        validator = BookingWindowValidator(build_index_for_unit(unit_id))
        result = validator.validate(data["check_in"], data["check_out"])
        if not result.is_valid:
            return Response(validation_result_payload(result), status=status.HTTP_400_BAD_REQUEST)

        calculator = get_price_calculator()
        quote = calculator.quote_nightly(data["check_in"], data["check_out"], data["rate_per_night"])
        breakdown = calculator.breakdown(
            quote,
            cleaning_fee=data["cleaning_fee"],
            discount_amount=data["discount_amount"],
        )
        return Response(PriceBreakdownSerializer(breakdown).data)


class LongStayQuoteView(AvailabilityAPIView):
    """Devis pour un séjour longue durée, facturé au mois."""

    def post(self, request, unit_id):  # type: ignore
        serializer = LongStayQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        validator = LongStayValidator(
            build_index_for_unit(unit_id),
            min_months=data.get("min_months"),
            max_months=data.get("max_months") or settings.BOOKING_DEFAULT_MAX_MONTHS,
        )
        result = validator.validate(data["check_in"], data["check_out"])
        if not result.is_valid:
            return Response(validation_result_payload(result), status=status.HTTP_400_BAD_REQUEST)

        calculator = get_price_calculator()
        quote = calculator.quote_monthly(result.months, data["rate_per_month"])
        breakdown = calculator.breakdown(
            quote,
            cleaning_fee=data["cleaning_fee"],
            discount_amount=data["discount_amount"],
        )
        return Response(PriceBreakdownSerializer(breakdown).data)


class VehicleQuoteView(AvailabilityAPIView):
    """Devis pour une location de véhicule, facturée à la journée (minimum un jour)."""

    def post(self, request, unit_id):  # type: ignore
        serializer = VehicleQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        validator = BookingWindowValidator(build_index_for_unit(unit_id))
        result = validator.validate_rental(data["pickup"], data["return_date"])
        if not result.is_valid:
            return Response(validation_result_payload(result), status=status.HTTP_400_BAD_REQUEST)

        quote = get_price_calculator().quote_daily(data["pickup"], data["return_date"], data["rate_per_day"])
        return Response(PriceQuoteSerializer(quote).data)

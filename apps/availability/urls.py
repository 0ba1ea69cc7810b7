"""URL routing for the availability domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    BookingWindowView,
    LongStayQuoteView,
    NightlyQuoteView,
    UnitCalendarView,
    VehicleQuoteView,
)

urlpatterns = [
    path("<str:unit_id>/calendar/", UnitCalendarView.as_view(), name="unit-calendar"),
    path("<str:unit_id>/booking-window/", BookingWindowView.as_view(), name="unit-booking-window"),
    path("<str:unit_id>/quote/", NightlyQuoteView.as_view(), name="unit-quote"),
    path("<str:unit_id>/long-stay-quote/", LongStayQuoteView.as_view(), name="unit-long-stay-quote"),
    path("<str:unit_id>/vehicle-quote/", VehicleQuoteView.as_view(), name="unit-vehicle-quote"),
]

"""Availability app package.

This app hosts the booking-window engine: the per-unit availability index,
check-in/check-out validation, long-stay month rules and price quotes. The
engine itself lives in ``domain`` and has no Django dependencies; the rest
of the app loads unavailable dates from the database and exposes the engine
over the REST API.
"""

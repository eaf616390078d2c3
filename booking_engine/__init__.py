"""Availability, conflict detection and pricing for bookable facilities."""

__version__ = "0.1.0"

"""Hostel Gate — entry/exit tracking for hostel residents."""

__version__ = "1.0.0"

"""Engagement dashboard: polls sheet CSV exports and serves chart and ranking views."""

__version__ = "0.1.0"

"""Utility functions for chatroute."""

from chatroute.utils.helpers import configure_logging

__all__ = ["configure_logging"]

"""Service module exports."""

from . import display, forms, sync, tracker

__all__ = ["display", "forms", "sync", "tracker"]

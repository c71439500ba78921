"""Availability orchestration."""

from .service import check_availability

__all__ = ["check_availability"]

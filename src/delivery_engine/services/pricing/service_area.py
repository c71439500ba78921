"""Served-city whitelist checks."""

from __future__ import annotations

from typing import Optional

from ...models.domain import ServiceAreaConfig
from ..text import normalize_text, texts_match


def is_city_served(config: Optional[ServiceAreaConfig], city: Optional[str]) -> bool:
    """True when ``city`` matches any configured city (exact or either-direction substring).

    The substring policy favours availability over precision for free-text city names,
    so "Sao Paulo" also matches "São Paulo - SP".
    """

    if config is None or not normalize_text(city):
        return False
    return any(texts_match(served, city) for served in config.served_cities)

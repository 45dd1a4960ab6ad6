"""Messaging deep links for contacting customers."""

from __future__ import annotations

import logging
import re
import webbrowser
from typing import Optional

from ..config import settings
from ..errors import InputValidationError

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str, country_code: Optional[str] = None, trunk_prefix: Optional[str] = None) -> str:
    """Digits only, with the local trunk prefix swapped for the country code."""
    country_code = country_code or settings.country_code
    trunk_prefix = trunk_prefix or settings.trunk_prefix
    digits = _NON_DIGITS.sub("", phone or "")
    if not digits:
        raise InputValidationError("Phone number is not available")
    if digits.startswith(country_code):
        return digits
    if digits.startswith(trunk_prefix):
        return country_code + digits[len(trunk_prefix):]
    return country_code + digits


def build_message_url(phone: str) -> str:
    return f"{settings.messaging_base_url.rstrip('/')}/{normalize_phone(phone)}"


def open_message_link(phone: str) -> str:
    """Open the messaging link in the local browser without waiting on it; return the URL."""
    url = build_message_url(phone)
    if settings.open_links:
        opened = webbrowser.open(url, new=2)
        if not opened:
            logger.warning(f"No browser available to open {url}")
    logger.info(f"Opening messaging link {url}")
    return url

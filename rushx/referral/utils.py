"""Referral code helpers."""

from __future__ import annotations

import secrets

from rushx.core.constants import REFERRAL_CODE_ALPHABET, REFERRAL_CODE_LENGTH


def generate_code(length: int = REFERRAL_CODE_LENGTH) -> str:
    """Return a random uppercase alphanumeric code."""
    return "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))


def normalize_code(code: str | None) -> str:
    """Canonicalize user input; codes are stored upper-case."""
    return (code or "").strip().upper()


def percentage_of(amount: float, percentage: float) -> float:
    """Return ``percentage`` percent of ``amount`` rounded to paise."""
    return round(float(amount) * float(percentage) / 100, 2)


def referral_link(base_url: str, code: str) -> str:
    """Build the shareable tournaments link carrying the code."""
    return f"{base_url.rstrip('/')}/tournaments?ref={normalize_code(code)}"

"""Utilities for keeping PHI and credentials out of log output."""
from typing import Any, Optional
import hashlib
import os
import re

# Patterns for detecting PHI in free text (e.g., SSN, phone numbers, emails)
PHI_PATTERNS = [
    (r"\b\d{3}-\d{2}-\d{4}\b", "[SSN_REDACTED]"),  # SSN: 123-45-6789
    (r"\b\d{3}-\d{3}-\d{4}\b", "[PHONE_REDACTED]"),  # Phone: 123-456-7890
    (r"\b\(\d{3}\)\s?\d{3}-\d{4}\b", "[PHONE_REDACTED]"),  # Phone: (123) 456-7890
    (
        r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b",
        "[EMAIL_REDACTED]",
    ),
]

# Salt for hashing identifiers so log lines can be correlated without exposing them
_HASH_SALT = os.getenv("PHI_HASH_SALT", "patient-risk")


def hash_identifier(value: Any, salt: Optional[str] = None) -> str:
    """
    Create a short deterministic hash of a patient identifier for logging.

    Args:
        value: Identifier to hash (converted to string)
        salt: Optional salt override (defaults to PHI_HASH_SALT env var)

    Returns:
        First 12 hex characters of the salted SHA-256 digest, or "" for blanks
    """
    if value is None:
        return ""

    normalized = str(value).strip()
    if not normalized:
        return ""

    hash_input = f"{salt or _HASH_SALT}:{normalized}"
    return hashlib.sha256(hash_input.encode("utf-8")).hexdigest()[:12]


def sanitize_text(value: Any) -> str:
    """
    Redact PHI-looking substrings from free text such as response bodies.

    Args:
        value: The value to sanitize (converted to string)

    Returns:
        Sanitized string with PHI patterns replaced
    """
    if value is None:
        return ""

    text = str(value)
    for pattern, replacement in PHI_PATTERNS:
        text = re.sub(pattern, replacement, text)
    return text


def mask_secret(secret: Optional[str], visible: int = 4) -> str:
    """Mask a credential, keeping only its last few characters."""
    if not secret:
        return ""
    if len(secret) <= visible:
        return "*" * len(secret)
    return "*" * (len(secret) - visible) + secret[-visible:]

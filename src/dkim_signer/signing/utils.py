"""
Utility functions for DKIM signing

This module provides small helpers shared by the signing stages: h= list
parsing, whitespace collapsing, signature wrapping and timing.
"""

import re
import time
from typing import Iterable, Tuple, Union

from ..mail.headers import normalize_header_name, validate_header_name

WHITESPACE_RUN = re.compile(r'\s+')

# Line width used when folding the base64 signature
SIGNATURE_WRAP_WIDTH = 73


def split_header_list(headers: Union[str, Iterable[str]]) -> Tuple[str, ...]:
    """
    Split an h= value into normalized header names.

    Args:
        headers: Colon-separated string or iterable of header names

    Returns:
        tuple: Lowercase header names in their original order
    """
    if isinstance(headers, str):
        headers = headers.split(':')

    names = []
    for name in headers:
        name = normalize_header_name(name)
        if name:
            names.append(name)

    return tuple(names)


def invalid_header_names(names: Iterable[str]) -> Tuple[str, ...]:
    """Return the names that are not valid header field names."""
    return tuple(name for name in names if not validate_header_name(name))


def collapse_whitespace(value: str) -> str:
    """Replace every run of whitespace with a single space."""
    return WHITESPACE_RUN.sub(' ', value)


def wrap_signature(encoded: str, width: int = SIGNATURE_WRAP_WIDTH) -> str:
    """
    Insert a single space every ``width`` characters.

    Args:
        encoded: Base64 signature text
        width: Chunk width

    Returns:
        str: Space-separated chunks with no trailing space
    """
    chunks = [encoded[i:i + width] for i in range(0, len(encoded), width)]
    return " ".join(chunks).strip()


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000

"""
Relaxed canonicalization for DKIM signing

This module provides the body normalizer and the header canonicalizer. Both
are pure functions over their inputs; the per-call ``CanonicalHeaderSet`` is
created here and handed back to the caller.
"""

import re
from typing import Dict, Iterable, List, Union

from ..mail.headers import Header, HeaderStore, normalize_header_name
from .types import CanonicalHeaderSet, DKIM_SIGNATURE_FIELD, CRLF
from .utils import collapse_whitespace

# CRLF first so it is not split into two breaks; then CR, LF, VT and FF
NEWLINE = re.compile(rb'\r\n|\r|\n|\x0b|\x0c')

# Also the UTF-8 encodings of NEL, LINE SEPARATOR and PARAGRAPH SEPARATOR;
# only used when the whole body is valid UTF-8
UTF8_NEWLINE = re.compile(rb'\r\n|\r|\n|\x0b|\x0c|\xc2\x85|\xe2\x80[\xa8\xa9]')

CANONICAL_NEWLINE = b"\r\n"


def normalize_body(body: Union[str, bytes, None]) -> bytes:
    """
    Normalize a message body before hashing.

    Every newline sequence becomes CRLF and the body ends with exactly one
    CRLF; an empty body becomes a single CRLF. The Unicode line breaks NEL,
    LS and PS count as newlines only in bodies that decode as UTF-8, so
    8-bit text in other charsets keeps its bytes.

    Args:
        body: Message body

    Returns:
        bytes: Normalized body
    """
    if body is None:
        body = b""
    elif isinstance(body, str):
        body = body.encode('utf-8')

    body = _newline_pattern(body).sub(CANONICAL_NEWLINE, body)
    return body.rstrip(CANONICAL_NEWLINE) + CANONICAL_NEWLINE


def _newline_pattern(body: bytes):
    try:
        body.decode('utf-8')
    except UnicodeDecodeError:
        return NEWLINE
    return UTF8_NEWLINE


def canonicalize_header(name: str, value: str) -> str:
    """
    Build one relaxed canonical header line.

    Args:
        name: Header field name
        value: Header field value

    Returns:
        str: ``lowercase-name:collapsed-value\\r\\n``
    """
    return f"{normalize_header_name(name)}:{collapse_whitespace(value)}{CRLF}"


def signed_header_names(headers_to_sign: Iterable[str]) -> List[str]:
    """
    Header names in signing order, ending with dkim-signature.

    Args:
        headers_to_sign: Configured h= names

    Returns:
        list: Lower-cased names; dkim-signature is appended when not listed
    """
    names = [normalize_header_name(name) for name in headers_to_sign]
    if DKIM_SIGNATURE_FIELD not in names:
        names.append(DKIM_SIGNATURE_FIELD)
    return names


def canonicalize_headers(
    headers: HeaderStore,
    headers_to_sign: Iterable[str],
    dkim_header: Header
) -> CanonicalHeaderSet:
    """
    Canonicalize the signed headers in configured order.

    Repeated headers are selected from the bottom of the header block up:
    the first mention of a name signs its last occurrence, a second mention
    the one above it. Headers named in the list but absent from the message
    are skipped. The ``dkim-signature`` entry always resolves to
    ``dkim_header``, the unsigned header of the call in flight.

    Args:
        headers: Message header collection
        headers_to_sign: Configured h= names
        dkim_header: Unsigned DKIM-Signature header

    Returns:
        CanonicalHeaderSet: Canonical lines in selection order
    """
    canonical = CanonicalHeaderSet()
    used: Dict[str, int] = {}

    for name in signed_header_names(headers_to_sign):
        if name == DKIM_SIGNATURE_FIELD:
            header = dkim_header
        else:
            occurrences = headers.get_all(name)
            seen = used.get(name, 0)
            if seen >= len(occurrences):
                continue
            header = occurrences[-1 - seen]
            used[name] = seen + 1

        canonical.append(name, canonicalize_header(name, header.get_field_value(encoded=True)))

    return canonical

"""
Mail header abstractions

Headers are plain objects exposing a field name and a field value; the
collection keeps them in insertion order and looks them up by
case-insensitive field name. The signer only depends on the ``HeaderStore``
capability interface.
"""

import threading
from email.header import Header as EncodedHeader
from typing import Iterable, Iterator, List, Optional, Protocol, runtime_checkable

from ..exceptions import HeaderError, SigningErrorCodes

DKIM_SIGNATURE_HEADER = "DKIM-Signature"


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for consistent processing.

    Args:
        name: Header name to normalize

    Returns:
        str: Lowercase header name
    """
    return name.lower().strip()


def validate_header_name(name: str) -> bool:
    """
    Validate header field name (printable US-ASCII, no colon).

    Args:
        name: Header name to validate

    Returns:
        bool: True if header name is valid
    """
    if not isinstance(name, str) or not name:
        return False

    return all(33 <= ord(char) <= 126 and char != ':' for char in name)


@runtime_checkable
class Header(Protocol):
    """A single message header"""

    def get_field_name(self) -> str:
        ...

    def get_field_value(self, encoded: bool = False) -> str:
        ...

    def to_string(self) -> str:
        ...


def split_header_line(line: str):
    """
    Split ``Name: value`` into its name and value.

    Raises:
        HeaderError: If the line has no colon or an invalid field name
    """
    name, sep, value = line.partition(':')
    name = name.strip()
    if not sep or not validate_header_name(name):
        raise HeaderError(
            f"Invalid header line: {line!r}",
            SigningErrorCodes.INVALID_HEADER_LINE,
            {"line": line}
        )

    return name, value.strip()


def _encode_value(value: str) -> str:
    try:
        value.encode('ascii')
        return value
    except UnicodeEncodeError:
        return EncodedHeader(value, 'utf-8').encode()


class GenericHeader:
    """Arbitrary name/value header"""

    def __init__(self, name: str, value: str):
        if not validate_header_name(name):
            raise HeaderError(
                f"Invalid header name: {name!r}",
                SigningErrorCodes.INVALID_HEADER_LINE,
                {"name": name}
            )
        self._name = name
        self._value = value

    @classmethod
    def from_string(cls, line: str) -> 'GenericHeader':
        name, value = split_header_line(line)
        return cls(name, value)

    def get_field_name(self) -> str:
        return self._name

    def get_field_value(self, encoded: bool = False) -> str:
        """
        Return the header value.

        Args:
            encoded: Return the RFC 2047 encoded form for non-ASCII values

        Returns:
            str: Header value
        """
        if encoded:
            return _encode_value(self._value)
        return self._value

    def to_string(self) -> str:
        return f"{self._name}: {self.get_field_value(encoded=True)}"

    def __repr__(self) -> str:
        return f"GenericHeader({self._name!r}, {self._value!r})"


class DkimSignatureHeader:
    """DKIM-Signature header; always US-ASCII"""

    def __init__(self, value: str):
        self._value = value

    @classmethod
    def from_string(cls, line: str) -> 'DkimSignatureHeader':
        """
        Build the header from a full ``DKIM-Signature: ...`` line.

        Raises:
            HeaderError: If the line is not a DKIM-Signature header
        """
        name, value = split_header_line(line)
        if name.lower().replace('-', '') != 'dkimsignature':
            raise HeaderError(
                "Invalid header line for DKIM-Signature string",
                SigningErrorCodes.INVALID_HEADER_LINE,
                {"name": name}
            )
        return cls(value)

    def get_field_name(self) -> str:
        return DKIM_SIGNATURE_HEADER

    def get_field_value(self, encoded: bool = False) -> str:
        return self._value

    def get_encoding(self) -> str:
        return 'ASCII'

    def to_string(self) -> str:
        return f"{DKIM_SIGNATURE_HEADER}: {self._value}"

    def __repr__(self) -> str:
        return f"DkimSignatureHeader({self._value!r})"


@runtime_checkable
class HeaderStore(Protocol):
    """Capability interface of an ordered header collection"""

    def __iter__(self) -> Iterator[Header]:
        ...

    def get(self, name: str) -> Optional[Header]:
        ...

    def get_all(self, name: str) -> List[Header]:
        ...

    def add_header(self, header: Header) -> None:
        ...

    def add_headers(self, headers: Iterable[Header]) -> None:
        ...

    def remove_header(self, name: str) -> bool:
        ...

    def clear_headers(self) -> None:
        ...

    def replace_headers(self, headers: Iterable[Header]) -> None:
        ...


class HeaderCollection:
    """
    Ordered, case-insensitive header collection

    Iteration works on a snapshot, so a concurrent ``replace_headers`` is
    never observed half done.
    """

    def __init__(self, headers: Optional[Iterable[Header]] = None):
        self._headers: List[Header] = []
        self._lock = threading.RLock()
        if headers:
            self.add_headers(headers)

    def __iter__(self) -> Iterator[Header]:
        with self._lock:
            snapshot = list(self._headers)
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._headers)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def get(self, name: str) -> Optional[Header]:
        """
        Get the first header with the given name.

        Args:
            name: Field name, matched case-insensitively

        Returns:
            The header, or None if absent
        """
        wanted = normalize_header_name(name)
        with self._lock:
            for header in self._headers:
                if normalize_header_name(header.get_field_name()) == wanted:
                    return header
        return None

    def get_all(self, name: str) -> List[Header]:
        wanted = normalize_header_name(name)
        with self._lock:
            return [header for header in self._headers
                    if normalize_header_name(header.get_field_name()) == wanted]

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    @staticmethod
    def _check_header(header) -> None:
        if not isinstance(header, Header):
            raise HeaderError(
                f"Not a header: {header!r}",
                SigningErrorCodes.INVALID_HEADER_LINE
            )

    def add_header(self, header: Header) -> None:
        self._check_header(header)
        with self._lock:
            self._headers.append(header)

    def add_header_line(self, line: str) -> None:
        self.add_header(GenericHeader.from_string(line))

    def add_headers(self, headers: Iterable[Header]) -> None:
        headers = list(headers)
        for header in headers:
            self._check_header(header)
        with self._lock:
            self._headers.extend(headers)

    def remove_header(self, name: str) -> bool:
        """
        Remove every header with the given name.

        Returns:
            bool: True if at least one header was removed
        """
        wanted = normalize_header_name(name)
        with self._lock:
            kept = [header for header in self._headers
                    if normalize_header_name(header.get_field_name()) != wanted]
            removed = len(kept) != len(self._headers)
            self._headers = kept
        return removed

    def clear_headers(self) -> None:
        with self._lock:
            self._headers = []

    def replace_headers(self, headers: Iterable[Header]) -> None:
        """Clear the collection and set the given headers as one step."""
        headers = list(headers)
        for header in headers:
            self._check_header(header)
        with self._lock:
            self._headers = headers

    def copy(self) -> 'HeaderCollection':
        with self._lock:
            return HeaderCollection(self._headers)

    def to_string(self) -> str:
        return "".join(f"{header.to_string()}\r\n" for header in self)

"""
Minimal outgoing mail message

Holds an ordered header collection and the raw body bytes. Parsing keeps the
body byte-exact; only the header block goes through the stdlib email parser.
"""

import re
from email.parser import HeaderParser
from email.policy import compat32
from typing import Iterable, Optional, Union

from .headers import GenericHeader, Header, HeaderCollection

HEADER_BODY_SEPARATOR = re.compile(rb'\r?\n\r?\n')
LINE_BREAK = re.compile(r'\r\n|\r|\n')


def _decode_header_block(header_block: bytes) -> str:
    # raw 8-bit headers are taken as UTF-8; anything else maps byte for byte
    try:
        return header_block.decode('utf-8')
    except UnicodeDecodeError:
        return header_block.decode('latin-1')


def _to_bytes(body: Union[str, bytes, None]) -> bytes:
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode('utf-8')
    return bytes(body)


class MailMessage:
    """
    Outgoing message made of headers and a body

    Attributes:
        headers: Ordered header collection
    """

    def __init__(self, headers: Optional[Iterable[Header]] = None, body: Union[str, bytes, None] = b""):
        self.headers = HeaderCollection(headers)
        self._body = _to_bytes(body)

    @classmethod
    def from_bytes(cls, raw: bytes) -> 'MailMessage':
        """
        Parse a raw RFC 5322 message.

        Args:
            raw: Complete message bytes

        Returns:
            MailMessage: Parsed message
        """
        raw = _to_bytes(raw)
        if raw.startswith(b"\r\n") or raw.startswith(b"\n"):
            # no header block at all
            return cls(body=raw.split(b"\n", 1)[1])

        match = HEADER_BODY_SEPARATOR.search(raw)
        if match:
            header_block, body = raw[:match.start()], raw[match.end():]
        else:
            header_block, body = raw, b""

        parsed = HeaderParser(policy=compat32).parsestr(_decode_header_block(header_block))
        headers = [GenericHeader(name, value.rstrip()) for name, value in parsed.items()]
        return cls(headers, body)

    def get_body(self) -> bytes:
        return self._body

    def set_body(self, body: Union[str, bytes]) -> None:
        self._body = _to_bytes(body)

    def get_headers(self) -> HeaderCollection:
        return self.headers

    def add_header(self, name: str, value: str) -> None:
        self.headers.add_header(GenericHeader(name, value))

    def as_bytes(self) -> bytes:
        """
        Serialize the message with CRLF line endings in the header block.

        Returns:
            bytes: Header lines, a blank line, then the body
        """
        lines = [LINE_BREAK.sub("\r\n", header.to_string()) for header in self.headers]
        header_block = "".join(f"{line}\r\n" for line in lines)
        return header_block.encode('ascii', errors='surrogateescape') + b"\r\n" + self._body

    def __repr__(self) -> str:
        return f"MailMessage(headers={len(self.headers)}, body={len(self._body)} bytes)"

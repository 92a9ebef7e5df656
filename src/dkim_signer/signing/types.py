"""
Type definitions for DKIM signing

This module provides the data classes shared by the signing pipeline stages:
the signer configuration, the per-call canonical header accumulator, the
intermediate (unsigned) DKIM-Signature tag set and the signing result.
"""

from typing import Any, Dict, List, Tuple
from dataclasses import dataclass, field

from ..exceptions import ConfigurationError, SigningErrorCodes
from ..mail.headers import DKIM_SIGNATURE_HEADER


DKIM_SIGNATURE_FIELD = "dkim-signature"

DEFAULT_VERSION = "1"
DEFAULT_ALGORITHM = "rsa-sha1"
CANONICALIZATION = "relaxed"

CRLF = "\r\n"


@dataclass(frozen=True)
class SigningConfig:
    """
    Configuration for one signer instance

    Attributes:
        domain: Signing domain (d= tag)
        selector: Key selector (s= tag)
        headers_to_sign: Ordered, lower-cased header names (h= tag)
        private_key: Parsed RSA private key, shared read-only across calls
        algorithm: Signature algorithm (a= tag)
        version: DKIM version (v= tag)
    """
    domain: str
    selector: str
    headers_to_sign: Tuple[str, ...]
    private_key: Any
    algorithm: str = DEFAULT_ALGORITHM
    version: str = DEFAULT_VERSION

    def __post_init__(self):
        """Normalize header names to a lower-cased tuple without duplicates"""
        if isinstance(self.headers_to_sign, str):
            raise ConfigurationError(
                "headers_to_sign must be a sequence of header names",
                SigningErrorCodes.INVALID_CONFIG,
                {"headers_to_sign": self.headers_to_sign}
            )

        names: List[str] = []
        for name in self.headers_to_sign or ():
            name = name.strip().lower()
            if name and name not in names:
                names.append(name)

        # frozen dataclass
        object.__setattr__(self, 'headers_to_sign', tuple(names))

    @property
    def header_list(self) -> str:
        """Colon-joined header names as they appear in the h= tag"""
        return ":".join(self.headers_to_sign)

    def params(self) -> Dict[str, str]:
        """Configurable DKIM params keyed by tag name"""
        return {
            'v': self.version,
            'a': self.algorithm,
            'd': self.domain,
            'h': self.header_list,
            's': self.selector,
        }


@dataclass
class CanonicalHeaderSet:
    """
    Canonical header lines accumulated during one signing call

    Attributes:
        lines: Canonical lines (``name:value\\r\\n``) in selection order
        names: Header names that produced a line, in the same order
    """
    lines: List[str] = field(default_factory=list)
    names: List[str] = field(default_factory=list)

    def append(self, name: str, line: str) -> None:
        self.names.append(name)
        self.lines.append(line)

    def render(self) -> str:
        """
        Render the canonical header block that gets signed.

        Returns:
            str: Concatenated lines without the trailing CRLF
        """
        return "".join(self.lines).rstrip(CRLF)

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class EmptyDkimHeader:
    """
    DKIM-Signature tag set with every value filled in except b=

    Field order is the output order of the rendered tags.
    """
    v: str
    a: str
    bh: str
    c: str
    d: str
    h: str
    s: str
    b: str = ""

    def tags(self) -> List[Tuple[str, str]]:
        """Tags as ordered (name, value) pairs"""
        return [
            ('v', self.v),
            ('a', self.a),
            ('bh', self.bh),
            ('c', self.c),
            ('d', self.d),
            ('h', self.h),
            ('s', self.s),
            ('b', self.b),
        ]

    def render(self) -> str:
        """
        Render the header value.

        Every tag is written as ``key=value; ``, then trailing whitespace and
        the final semicolon are dropped, which leaves ``...; b=``.

        Returns:
            str: DKIM-Signature header value without a signature
        """
        rendered = "".join(f"{key}={value}; " for key, value in self.tags())
        return rendered.rstrip()[:-1]


@dataclass
class SigningResult:
    """
    Result of signing one message

    Attributes:
        header_value: Complete DKIM-Signature header value
        signature: Base64, space-wrapped signature (b= value)
        body_hash: Base64 SHA-1 of the normalized body (bh= value)
        canonical_headers: Canonical header block that was signed
        signed_headers: Header names that contributed a canonical line
        raw_signature: Raw RSA signature bytes
    """
    header_value: str
    signature: str
    body_hash: str
    canonical_headers: str
    signed_headers: List[str]
    raw_signature: bytes

    def __post_init__(self):
        if not self.signature:
            raise ValueError("Signature cannot be empty")

    @property
    def header(self) -> str:
        """Full header line as it appears in the message"""
        return f"{DKIM_SIGNATURE_HEADER}: {self.header_value}"


# Tag names that may be set through set_param
CONFIGURABLE_PARAMS = ('v', 'a', 'd', 'h', 's')
REQUIRED_PARAMS = ('d', 'h', 's')

Options = Dict[str, Any]

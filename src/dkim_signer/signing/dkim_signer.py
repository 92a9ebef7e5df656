"""
DKIM signer for outgoing email messages

This module provides the main signer implementation. ``sign_message`` runs
the pipeline body normalization → unsigned header → header canonicalization
→ RSA-SHA1 signature → header splice. All per-call state is local to the
call; the signer itself only holds the configuration.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Mapping, Union

from ..crypto.rsa_keys import load_private_key
from ..exceptions import DkimSignerError, SigningErrorCodes
from ..mail.headers import DkimSignatureHeader, HeaderCollection, normalize_header_name
from ..mail.message import MailMessage
from .canonicalization import normalize_body, canonicalize_headers
from .digest import build_empty_dkim_header
from .engine import sign_canonical_headers, encode_signature
from .signing_config import apply_params, config_from_options, validate_signing_config
from .types import SigningConfig, SigningResult, Options, DKIM_SIGNATURE_FIELD
from .utils import PerformanceTimer

logger = logging.getLogger(__name__)

# Signing runs slower than this are logged as a warning
SLOW_SIGNING_MS = 250


def _is_dkim_signature(header) -> bool:
    return normalize_header_name(header.get_field_name()) == DKIM_SIGNATURE_FIELD


class DkimSigner:
    """
    DKIM signer producing one relaxed/RSA-SHA1 DKIM-Signature header

    The configuration is immutable; ``set_param`` and ``set_private_key``
    swap in a new configuration under a lock, and every ``sign_message`` call
    reads the configuration once, so concurrent calls never share state.
    """

    def __init__(self, config: SigningConfig):
        """
        Initialize the signer with configuration.

        Args:
            config: Signing configuration

        Raises:
            ConfigurationError: If configuration is invalid
        """
        validate_signing_config(config)
        self._config = config
        self._lock = threading.Lock()

        logger.info(f"Initialized DKIM signer for domain={config.domain}, selector={config.selector}")

    @classmethod
    def from_options(cls, options: Options) -> 'DkimSigner':
        """
        Create a signer from a ``{"dkim": {...}}`` options mapping.

        Raises:
            ConfigurationError: If the options are incomplete or invalid
        """
        return cls(config_from_options(options))

    @property
    def config(self) -> SigningConfig:
        return self._config

    def set_param(self, key: str, value: Any) -> None:
        """
        Set one DKIM param (v, a, d, h or s).

        Raises:
            ConfigurationError: If the param name is unknown
        """
        self.set_params({key: value})

    def set_params(self, params: Mapping[str, Any]) -> None:
        if not params:
            return

        with self._lock:
            self._config = apply_params(self._config, params)

    def set_private_key(self, private_key) -> None:
        """
        Parse and install a new private key.

        Raises:
            ConfigurationError: If the key material is missing or malformed
        """
        key = load_private_key(private_key)
        with self._lock:
            self._config = replace(self._config, private_key=key)

    def sign_message(self, message: MailMessage) -> SigningResult:
        """
        Sign a message in place.

        The message body is replaced by its normalized form and the header
        collection is replaced by the DKIM-Signature header followed by the
        other headers in their original order. If anything fails before the
        signature is computed, the headers are left untouched.

        Args:
            message: Message exposing get_body/set_body/get_headers

        Returns:
            SigningResult: Final header value and signing details

        Raises:
            ConfigurationError: If d, h or s is empty, or no key is set
            CryptographicError: If the sign primitive fails
        """
        config = self._config
        timer = PerformanceTimer()

        try:
            body = normalize_body(message.get_body())
            message.set_body(body)

            empty_dkim = build_empty_dkim_header(config, body)
            empty_header = DkimSignatureHeader(empty_dkim.render())

            headers = message.get_headers()
            original = [header for header in headers if not _is_dkim_signature(header)]

            # stage the unsigned header on a copy so a failure leaves the message as is
            staged = HeaderCollection(original)
            staged.add_header(empty_header)

            canonical = canonicalize_headers(staged, config.headers_to_sign, empty_header)
            canonical_block = canonical.render()

            raw_signature = sign_canonical_headers(canonical_block, config.private_key)
            signature = encode_signature(raw_signature)

            signed_header = DkimSignatureHeader(empty_header.get_field_value() + signature)
            headers.replace_headers([signed_header] + original)

        except Exception as e:
            if isinstance(e, DkimSignerError):
                raise

            raise DkimSignerError(
                f"Message signing failed: {e}",
                SigningErrorCodes.SIGNING_FAILED,
                {"original_error": str(e)}
            ) from e

        elapsed_ms = timer.elapsed_ms()
        logger.debug(
            f"Signed message for d={config.domain} s={config.selector} "
            f"headers={':'.join(canonical.names)} in {elapsed_ms:.2f}ms"
        )
        if elapsed_ms > SLOW_SIGNING_MS:
            logger.warning(f"Signing operation took {elapsed_ms:.2f}ms (threshold: {SLOW_SIGNING_MS}ms)")

        return SigningResult(
            header_value=signed_header.get_field_value(),
            signature=signature,
            body_hash=empty_dkim.bh,
            canonical_headers=canonical_block,
            signed_headers=list(canonical.names),
            raw_signature=raw_signature,
        )


def create_signer(config: Union[SigningConfig, Options]) -> DkimSigner:
    """
    Create a new DKIM signer.

    Args:
        config: Signing configuration or ``{"dkim": {...}}`` options mapping

    Returns:
        DkimSigner: Configured signer instance
    """
    if isinstance(config, SigningConfig):
        return DkimSigner(config)
    return DkimSigner.from_options(config)


def sign_message(
    message: MailMessage,
    config: Union[SigningConfig, Options],
) -> SigningResult:
    """
    Sign a message with the given configuration.

    Args:
        message: Message to sign in place
        config: Signing configuration or options mapping

    Returns:
        SigningResult: Signing result
    """
    signer = create_signer(config)
    return signer.sign_message(message)


def sign_bytes(
    raw_message: bytes,
    signer: Union[DkimSigner, SigningConfig, Options],
    header_only: bool = False,
) -> bytes:
    """
    Parse, sign and serialize a raw message.

    Args:
        raw_message: Complete RFC 5322 message
        signer: Signer, signing configuration or options mapping
        header_only: Return only the ``DKIM-Signature: ...`` line

    Returns:
        bytes: Signed message, or the header line with a trailing CRLF
    """
    if not isinstance(signer, DkimSigner):
        signer = create_signer(signer)

    message = MailMessage.from_bytes(raw_message)
    result = signer.sign_message(message)

    if header_only:
        return result.header.encode('ascii') + b"\r\n"
    return message.as_bytes()

"""
Signature engine: RSA-SHA1 over the canonical header block
"""

import base64
import logging

from ..crypto.rsa_keys import rsa_sha1_sign
from ..exceptions import ConfigurationError, CryptographicError, SigningErrorCodes
from .utils import wrap_signature

logger = logging.getLogger(__name__)


def sign_canonical_headers(canonical_block: str, private_key) -> bytes:
    """
    Sign the canonical header block.

    Args:
        canonical_block: Rendered ``CanonicalHeaderSet``
        private_key: Parsed RSA private key

    Returns:
        bytes: Raw PKCS#1 v1.5 signature

    Raises:
        ConfigurationError: If no private key is configured
        CryptographicError: If the sign primitive fails
    """
    if private_key is None:
        raise ConfigurationError(
            "No private key given.",
            SigningErrorCodes.MISSING_PRIVATE_KEY
        )

    try:
        return rsa_sha1_sign(private_key, canonical_block.encode('utf-8'))
    except Exception as e:
        logger.error(f"RSA-SHA1 signing failed: {e}")
        raise CryptographicError(
            f"Message signing failed: {e}",
            SigningErrorCodes.SIGNING_FAILED,
            {"original_error": str(e)}
        ) from e


def encode_signature(raw_signature: bytes) -> str:
    """
    Encode a raw signature for the b= tag.

    Args:
        raw_signature: Raw signature bytes

    Returns:
        str: Base64 text with a space every 73 characters
    """
    return wrap_signature(base64.b64encode(raw_signature).decode('ascii'))

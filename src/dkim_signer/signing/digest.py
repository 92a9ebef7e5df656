"""
Body hash and unsigned DKIM-Signature header assembly
"""

import base64
import hashlib

from ..exceptions import ConfigurationError, SigningErrorCodes
from .types import (
    EmptyDkimHeader,
    SigningConfig,
    CANONICALIZATION,
    REQUIRED_PARAMS,
)


def compute_body_hash(normalized_body: bytes) -> str:
    """
    Compute the bh= value.

    Args:
        normalized_body: Output of ``normalize_body``

    Returns:
        str: Base64 of the raw SHA-1 digest
    """
    digest_bytes = hashlib.sha1(normalized_body).digest()
    return base64.b64encode(digest_bytes).decode('ascii')


def build_empty_dkim_header(config: SigningConfig, normalized_body: bytes) -> EmptyDkimHeader:
    """
    Build the DKIM-Signature tag set without a signature.

    Required params are checked before anything is hashed.

    Args:
        config: Signer configuration
        normalized_body: Output of ``normalize_body``

    Returns:
        EmptyDkimHeader: Tags v, a, bh, c, d, h, s and an empty b

    Raises:
        ConfigurationError: If d, h or s is empty
    """
    params = config.params()
    missing = [key for key in REQUIRED_PARAMS if not params.get(key)]
    if missing:
        raise ConfigurationError(
            "Unable to sign message: missing params",
            SigningErrorCodes.MISSING_PARAM,
            {"missing_params": missing}
        )

    return EmptyDkimHeader(
        v=params['v'],
        a=params['a'],
        bh=compute_body_hash(normalized_body),
        c=CANONICALIZATION,
        d=params['d'],
        h=params['h'],
        s=params['s'],
        b='',
    )

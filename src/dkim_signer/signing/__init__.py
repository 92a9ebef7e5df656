"""
DKIM Signer - Message Signing Module

Relaxed/RSA-SHA1 DKIM-Signature generation: body normalization, header
canonicalization, body hash, signature and header splice.
"""

from .types import (
    SigningConfig,
    CanonicalHeaderSet,
    EmptyDkimHeader,
    SigningResult,
    DKIM_SIGNATURE_FIELD,
    DEFAULT_ALGORITHM,
    DEFAULT_VERSION,
    CANONICALIZATION,
)

from .dkim_signer import (
    DkimSigner,
    create_signer,
    sign_message,
    sign_bytes,
)

from .canonicalization import (
    normalize_body,
    canonicalize_header,
    canonicalize_headers,
    signed_header_names,
)

from .digest import (
    compute_body_hash,
    build_empty_dkim_header,
)

from .engine import (
    sign_canonical_headers,
    encode_signature,
)

from .signing_config import (
    SigningConfigBuilder,
    DEFAULT_HEADERS_TO_SIGN,
    create_signing_config,
    config_from_options,
    apply_params,
    validate_signing_config,
)

from .utils import (
    split_header_list,
    collapse_whitespace,
    wrap_signature,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'DkimSigner',
    'create_signer',
    'sign_message',
    'sign_bytes',
    # Types
    'SigningConfig',
    'CanonicalHeaderSet',
    'EmptyDkimHeader',
    'SigningResult',
    'DKIM_SIGNATURE_FIELD',
    'DEFAULT_ALGORITHM',
    'DEFAULT_VERSION',
    'CANONICALIZATION',
    # Pipeline stages
    'normalize_body',
    'canonicalize_header',
    'canonicalize_headers',
    'signed_header_names',
    'compute_body_hash',
    'build_empty_dkim_header',
    'sign_canonical_headers',
    'encode_signature',
    # Configuration
    'SigningConfigBuilder',
    'DEFAULT_HEADERS_TO_SIGN',
    'create_signing_config',
    'config_from_options',
    'apply_params',
    'validate_signing_config',
    # Utilities
    'split_header_list',
    'collapse_whitespace',
    'wrap_signature',
]

"""
DKIM Signer
Relaxed/RSA-SHA1 DKIM-Signature generation for outgoing mail
"""

from .version import __version__
from .crypto.rsa_keys import (
    RsaKeyPair,
    load_private_key,
    generate_key_pair,
    strip_pem_armor,
    check_platform_compatibility,
)
from .exceptions import (
    DkimSignerError,
    ConfigurationError,
    CryptographicError,
    HeaderError,
    SigningErrorCodes,
)
from .mail import (
    Header,
    HeaderStore,
    HeaderCollection,
    GenericHeader,
    DkimSignatureHeader,
    MailMessage,
)
from .config import (
    load_options_from_json,
    load_options_from_file,
)
from .signing import (
    # Core signing functionality
    DkimSigner,
    create_signer,
    sign_message,
    sign_bytes,
    # Types
    SigningConfig,
    SigningResult,
    EmptyDkimHeader,
    CanonicalHeaderSet,
    # Configuration
    SigningConfigBuilder,
    create_signing_config,
    config_from_options,
    DEFAULT_HEADERS_TO_SIGN,
    # Pipeline stages
    normalize_body,
    canonicalize_headers,
    compute_body_hash,
    build_empty_dkim_header,
    sign_canonical_headers,
    encode_signature,
)

__all__ = [
    '__version__',
    # Keys
    'RsaKeyPair',
    'load_private_key',
    'generate_key_pair',
    'strip_pem_armor',
    'check_platform_compatibility',
    # Exceptions
    'DkimSignerError',
    'ConfigurationError',
    'CryptographicError',
    'HeaderError',
    'SigningErrorCodes',
    # Message model
    'Header',
    'HeaderStore',
    'HeaderCollection',
    'GenericHeader',
    'DkimSignatureHeader',
    'MailMessage',
    # Configuration files
    'load_options_from_json',
    'load_options_from_file',
    # Signing
    'DkimSigner',
    'create_signer',
    'sign_message',
    'sign_bytes',
    'SigningConfig',
    'SigningResult',
    'EmptyDkimHeader',
    'CanonicalHeaderSet',
    'SigningConfigBuilder',
    'create_signing_config',
    'config_from_options',
    'DEFAULT_HEADERS_TO_SIGN',
    'normalize_body',
    'canonicalize_headers',
    'compute_body_hash',
    'build_empty_dkim_header',
    'sign_canonical_headers',
    'encode_signature',
]

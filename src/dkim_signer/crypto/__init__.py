"""
RSA key handling for DKIM signing
"""

from .rsa_keys import (
    RsaKeyPair,
    load_private_key,
    rsa_sha1_sign,
    generate_key_pair,
    strip_pem_armor,
    check_platform_compatibility,
)

__all__ = [
    'RsaKeyPair',
    'load_private_key',
    'rsa_sha1_sign',
    'generate_key_pair',
    'strip_pem_armor',
    'check_platform_compatibility',
]

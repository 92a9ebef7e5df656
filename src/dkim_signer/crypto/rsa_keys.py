"""
RSA key handling for DKIM signing

This module parses the configured private key once, signs canonical header
blocks with RSA PKCS#1 v1.5 / SHA-1 and generates key pairs for operators
setting up a new selector.
"""

import base64
import platform
import sys
from dataclasses import dataclass
from typing import Any, Dict, Union

import cryptography
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..exceptions import ConfigurationError, SigningErrorCodes


RSA_PRIVATE_KEY_LABEL = "RSA PRIVATE KEY"
PKCS8_PRIVATE_KEY_LABEL = "PRIVATE KEY"

PEM_LINE_WIDTH = 64
MIN_KEY_SIZE = 1024
DEFAULT_KEY_SIZE = 2048


@dataclass
class RsaKeyPair:
    """
    Generated RSA key pair

    Attributes:
        private_key: Private key object
        private_key_pem: PKCS#1 PEM with header and footer
        key_body: PEM body without header/footer, as used in the config
        public_key_b64: Base64 DER SubjectPublicKeyInfo (the p= value)
        key_size: Modulus size in bits
    """
    private_key: rsa.RSAPrivateKey
    private_key_pem: bytes
    key_body: str
    public_key_b64: str
    key_size: int

    def dns_txt_value(self) -> str:
        """Key record value for the selector's _domainkey TXT record."""
        return f"v=DKIM1; k=rsa; p={self.public_key_b64}"


def strip_pem_armor(pem: Union[str, bytes]) -> str:
    """
    Remove the BEGIN/END lines from a PEM document.

    Args:
        pem: PEM text

    Returns:
        str: Base64 body lines joined with newlines
    """
    if isinstance(pem, bytes):
        pem = pem.decode('ascii')

    lines = [line.strip() for line in pem.strip().splitlines()]
    return "\n".join(line for line in lines if line and not line.startswith("-----"))


def _armor(body: str, label: str) -> bytes:
    compact = "".join(body.split())
    lines = [compact[i:i + PEM_LINE_WIDTH] for i in range(0, len(compact), PEM_LINE_WIDTH)]
    return ("\n".join([f"-----BEGIN {label}-----", *lines, f"-----END {label}-----"]) + "\n").encode('ascii')


def _pem_candidates(material: str):
    if "-----BEGIN" in material:
        return [material.strip().encode('ascii') + b"\n"]
    return [_armor(material, RSA_PRIVATE_KEY_LABEL), _armor(material, PKCS8_PRIVATE_KEY_LABEL)]


def load_private_key(material: Union[str, bytes, rsa.RSAPrivateKey, None]) -> rsa.RSAPrivateKey:
    """
    Parse RSA private key material.

    Accepts a PEM body without header/footer lines (the configuration
    format), a complete PEM document, or an already parsed key.

    Args:
        material: Key material

    Returns:
        RSAPrivateKey: Parsed key

    Raises:
        ConfigurationError: If the material is missing, malformed or not RSA
    """
    if isinstance(material, rsa.RSAPrivateKey):
        return material

    if isinstance(material, bytes):
        try:
            material = material.decode('ascii')
        except UnicodeDecodeError:
            raise ConfigurationError(
                "Invalid private key given.",
                SigningErrorCodes.INVALID_PRIVATE_KEY,
                {"reason": "key material is not ASCII"}
            )

    if not material or not material.strip():
        raise ConfigurationError(
            "No private key given.",
            SigningErrorCodes.MISSING_PRIVATE_KEY
        )

    errors = []
    for pem in _pem_candidates(material):
        try:
            key = serialization.load_pem_private_key(pem, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            errors.append(str(e))
            continue

        if not isinstance(key, rsa.RSAPrivateKey):
            raise ConfigurationError(
                "Invalid private key given.",
                SigningErrorCodes.INVALID_PRIVATE_KEY,
                {"reason": f"expected an RSA key, got {type(key).__name__}"}
            )
        return key

    raise ConfigurationError(
        "Invalid private key given.",
        SigningErrorCodes.INVALID_PRIVATE_KEY,
        {"original_error": errors[-1] if errors else "unknown"}
    )


def rsa_sha1_sign(private_key: rsa.RSAPrivateKey, data: bytes) -> bytes:
    """
    Sign data with RSA PKCS#1 v1.5 and SHA-1.

    Args:
        private_key: RSA private key
        data: Bytes to sign

    Returns:
        bytes: Raw signature
    """
    return private_key.sign(data, padding.PKCS1v15(), hashes.SHA1())


def generate_key_pair(key_size: int = DEFAULT_KEY_SIZE) -> RsaKeyPair:
    """
    Generate a new RSA key pair for a DKIM selector.

    Args:
        key_size: Modulus size in bits (at least 1024)

    Returns:
        RsaKeyPair: The generated key pair

    Raises:
        ConfigurationError: If the key size is too small
    """
    if key_size < MIN_KEY_SIZE:
        raise ConfigurationError(
            f"Key size must be at least {MIN_KEY_SIZE} bits",
            SigningErrorCodes.INVALID_CONFIG,
            {"key_size": key_size}
        )

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_der = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )

    return RsaKeyPair(
        private_key=private_key,
        private_key_pem=private_pem,
        key_body=strip_pem_armor(private_pem),
        public_key_b64=base64.b64encode(public_der).decode('ascii'),
        key_size=key_size,
    )


def check_platform_compatibility() -> Dict[str, Any]:
    """
    Check that RSA-SHA1 signing works in this environment.

    Returns:
        dict: Compatibility information including the cryptography version,
              RSA-SHA1 support and platform details
    """
    compatibility = {
        'cryptography_version': cryptography.__version__,
        'rsa_sha1_supported': False,
        'platform_info': {
            'system': platform.system(),
            'python_version': sys.version,
        }
    }

    try:
        key = rsa.generate_private_key(public_exponent=65537, key_size=MIN_KEY_SIZE)
        signature = rsa_sha1_sign(key, b"compatibility check")
        key.public_key().verify(signature, b"compatibility check", padding.PKCS1v15(), hashes.SHA1())
        compatibility['rsa_sha1_supported'] = True
    except Exception as e:
        compatibility['error'] = str(e)

    return compatibility

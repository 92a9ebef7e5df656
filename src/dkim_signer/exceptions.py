"""
Exception classes for the DKIM signer
"""

from typing import Optional, Dict, Any


class DkimSignerError(Exception):
    """Base exception for all DKIM signer errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(message='{self.message}', "
                f"error_code='{self.error_code}', details={self.details})")


class ConfigurationError(DkimSignerError):
    """Exception raised for missing or invalid signer configuration"""
    pass


class CryptographicError(DkimSignerError):
    """Exception raised when the signing primitive itself fails"""
    pass


class HeaderError(DkimSignerError):
    """Exception raised for malformed header lines"""
    pass


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Configuration errors
    MISSING_DKIM_CONFIG = "MISSING_DKIM_CONFIG"
    MISSING_PRIVATE_KEY = "MISSING_PRIVATE_KEY"
    INVALID_PRIVATE_KEY = "INVALID_PRIVATE_KEY"
    MISSING_PARAM = "MISSING_PARAM"
    INVALID_PARAM = "INVALID_PARAM"
    INVALID_CONFIG = "INVALID_CONFIG"

    # Configuration file errors
    FILE_ERROR = "FILE_ERROR"
    PARSE_ERROR = "PARSE_ERROR"

    # Header errors
    INVALID_HEADER_LINE = "INVALID_HEADER_LINE"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"

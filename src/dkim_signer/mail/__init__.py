"""
Message and header model consumed by the signer
"""

from .headers import (
    Header,
    HeaderStore,
    HeaderCollection,
    GenericHeader,
    DkimSignatureHeader,
    split_header_line,
)
from .message import MailMessage

__all__ = [
    'Header',
    'HeaderStore',
    'HeaderCollection',
    'GenericHeader',
    'DkimSignatureHeader',
    'split_header_line',
    'MailMessage',
]

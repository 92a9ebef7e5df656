"""
Configuration loading for the DKIM signer
"""

from .loader import (
    DEFAULT_CONFIG_PATHS,
    load_options_from_json,
    load_options_from_file,
    load_default_options,
)

__all__ = [
    'DEFAULT_CONFIG_PATHS',
    'load_options_from_json',
    'load_options_from_file',
    'load_default_options',
]

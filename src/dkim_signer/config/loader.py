"""
Configuration file loading for the DKIM signer

Loads the ``dkim`` options block from JSON. The file mirrors the options
mapping accepted by ``DkimSigner.from_options``::

    {
      "dkim": {
        "private_key": "<PEM body without header/footer lines>",
        "params": {"d": "example.com", "h": "from:to:subject", "s": "sel1"}
      }
    }

``private_key_file`` may be given instead of ``private_key``; relative paths
are resolved against the configuration file's directory.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from ..exceptions import ConfigurationError, SigningErrorCodes
from ..signing.types import Options

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS = [
    Path("dkim.json"),
    Path("config/dkim.json"),
]


def load_options_from_json(json_string: str, base_dir: Optional[Path] = None) -> Options:
    """
    Parse signer options from a JSON string.

    Args:
        json_string: JSON document
        base_dir: Directory used to resolve a relative ``private_key_file``

    Returns:
        dict: Options mapping

    Raises:
        ConfigurationError: If the JSON is invalid or not an object
    """
    try:
        options = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Failed to parse configuration JSON: {e}",
            SigningErrorCodes.PARSE_ERROR
        )

    if not isinstance(options, dict):
        raise ConfigurationError(
            "Configuration must be a JSON object",
            SigningErrorCodes.PARSE_ERROR,
            {"type": type(options).__name__}
        )

    dkim = options.get('dkim')
    if isinstance(dkim, dict) and not dkim.get('private_key') and dkim.get('private_key_file'):
        dkim['private_key'] = _read_key_file(dkim.pop('private_key_file'), base_dir)

    return options


def load_options_from_file(file_path: Union[str, Path]) -> Options:
    """
    Load signer options from a JSON file.

    Args:
        file_path: Path to the configuration file

    Returns:
        dict: Options mapping

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    path = Path(file_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            json_string = f.read()
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            SigningErrorCodes.FILE_ERROR,
            {"path": str(path)}
        )

    logger.debug(f"Loaded DKIM configuration from {path}")
    return load_options_from_json(json_string, base_dir=path.parent)


def load_default_options() -> Options:
    """
    Load options from the first default location that exists.

    Raises:
        ConfigurationError: If no default configuration file is found
    """
    for path in DEFAULT_CONFIG_PATHS:
        if path.exists():
            return load_options_from_file(path)

    raise ConfigurationError(
        "Default configuration file not found",
        SigningErrorCodes.FILE_ERROR,
        {"searched": [str(path) for path in DEFAULT_CONFIG_PATHS]}
    )


def _read_key_file(key_path: Union[str, Path], base_dir: Optional[Path]) -> str:
    path = Path(key_path)
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path

    try:
        with open(path, 'r', encoding='ascii') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Failed to read private key file: {e}",
            SigningErrorCodes.FILE_ERROR,
            {"path": str(path)}
        )

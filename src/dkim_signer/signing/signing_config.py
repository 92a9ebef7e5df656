"""
Configuration management for DKIM signing

This module provides the configuration builder, parsing of the ``dkim``
options block and eager validation of a complete signer configuration.
"""

from typing import Any, Dict, Iterable, Mapping, Optional, Union

from cryptography.hazmat.primitives.asymmetric import rsa

from ..crypto.rsa_keys import load_private_key
from ..exceptions import ConfigurationError, SigningErrorCodes
from .types import (
    SigningConfig,
    Options,
    CONFIGURABLE_PARAMS,
    REQUIRED_PARAMS,
    DEFAULT_ALGORITHM,
    DEFAULT_VERSION,
)
from .utils import split_header_list, invalid_header_names

# Headers signed when the builder is not told otherwise
DEFAULT_HEADERS_TO_SIGN = ('from', 'to', 'subject', 'date')

SUPPORTED_ALGORITHMS = (DEFAULT_ALGORITHM,)


class SigningConfigBuilder:
    """
    Builder for creating signing configurations with fluent API
    """

    def __init__(self):
        self._domain: Optional[str] = None
        self._selector: Optional[str] = None
        self._headers = list(DEFAULT_HEADERS_TO_SIGN)
        self._algorithm: str = DEFAULT_ALGORITHM
        self._version: str = DEFAULT_VERSION
        self._private_key: Any = None

    def domain(self, domain: str) -> 'SigningConfigBuilder':
        """
        Set signing domain.

        Args:
            domain: Value of the d= tag

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._domain = domain
        return self

    def selector(self, selector: str) -> 'SigningConfigBuilder':
        """
        Set key selector.

        Args:
            selector: Value of the s= tag

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._selector = selector
        return self

    def headers(self, headers: Union[str, Iterable[str]]) -> 'SigningConfigBuilder':
        """
        Set headers to sign, replacing the defaults.

        Args:
            headers: Colon-separated h= value or list of header names

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._headers = list(split_header_list(headers))
        return self

    def add_header(self, header: str) -> 'SigningConfigBuilder':
        """
        Add a header to the signed set.

        Args:
            header: Header name to add

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        for name in split_header_list(header):
            if name not in self._headers:
                self._headers.append(name)
        return self

    def algorithm(self, algorithm: str) -> 'SigningConfigBuilder':
        self._algorithm = algorithm
        return self

    def version(self, version: str) -> 'SigningConfigBuilder':
        self._version = version
        return self

    def private_key(self, private_key: Union[str, bytes, rsa.RSAPrivateKey]) -> 'SigningConfigBuilder':
        """
        Set private key for signing.

        Args:
            private_key: PEM body, full PEM, or parsed RSA key

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._private_key = private_key
        return self

    def build(self) -> SigningConfig:
        """
        Build the signing configuration.

        Returns:
            SigningConfig: Complete, validated signing configuration

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self._private_key is None:
            raise ConfigurationError(
                "No private key given.",
                SigningErrorCodes.MISSING_PRIVATE_KEY
            )

        config = SigningConfig(
            domain=self._domain or '',
            selector=self._selector or '',
            headers_to_sign=tuple(self._headers),
            private_key=load_private_key(self._private_key),
            algorithm=self._algorithm,
            version=self._version,
        )
        validate_signing_config(config)
        return config


def create_signing_config() -> SigningConfigBuilder:
    """
    Create a new signing configuration builder.

    Returns:
        SigningConfigBuilder: New configuration builder
    """
    return SigningConfigBuilder()


def check_param_names(params: Mapping[str, Any]) -> None:
    """
    Reject unknown DKIM param names.

    Raises:
        ConfigurationError: If a key is not one of v, a, d, h, s
    """
    for key in params:
        if key not in CONFIGURABLE_PARAMS:
            raise ConfigurationError(
                f"Invalid param '{key}' given.",
                SigningErrorCodes.INVALID_PARAM,
                {"param": key, "allowed_params": list(CONFIGURABLE_PARAMS)}
            )


def apply_params(config: SigningConfig, params: Mapping[str, Any]) -> SigningConfig:
    """
    Return a copy of ``config`` with DKIM params replaced.

    Values are not checked for emptiness here; an empty d, h or s is
    rejected when the next message is signed. The a= value must still name
    the one implemented algorithm.

    Args:
        config: Current configuration
        params: Mapping of tag name to value

    Returns:
        SigningConfig: New configuration

    Raises:
        ConfigurationError: If a param name is unknown
    """
    check_param_names(params)

    values = config.params()
    values.update({key: "" if value is None else str(value) for key, value in params.items()})

    if values['a'] not in SUPPORTED_ALGORITHMS:
        raise ConfigurationError(
            f"Unsupported algorithm: {values['a']}",
            SigningErrorCodes.INVALID_PARAM,
            {"param": "a", "supported_algorithms": list(SUPPORTED_ALGORITHMS)}
        )

    return SigningConfig(
        domain=values['d'],
        selector=values['s'],
        headers_to_sign=split_header_list(values['h']),
        private_key=config.private_key,
        algorithm=values['a'],
        version=values['v'],
    )


def config_from_options(options: Optional[Options]) -> SigningConfig:
    """
    Build a signing configuration from an options mapping.

    Expected shape::

        {"dkim": {"private_key": "<PEM body>",
                  "params": {"d": ..., "h": ..., "s": ..., "v": ..., "a": ...}}}

    Args:
        options: Options mapping

    Returns:
        SigningConfig: Complete, validated signing configuration

    Raises:
        ConfigurationError: If the dkim block, the key or a required param
            is missing, a param name is unknown, or the key is malformed
    """
    if not options or not isinstance(options, Mapping) or 'dkim' not in options:
        raise ConfigurationError(
            "No 'dkim' config option set.",
            SigningErrorCodes.MISSING_DKIM_CONFIG
        )

    dkim = options['dkim']
    if not isinstance(dkim, Mapping):
        raise ConfigurationError(
            "The 'dkim' config option must be a mapping.",
            SigningErrorCodes.MISSING_DKIM_CONFIG,
            {"type": type(dkim).__name__}
        )

    private_key = dkim.get('private_key')
    if not private_key:
        raise ConfigurationError(
            "No 'private_key' given.",
            SigningErrorCodes.MISSING_PRIVATE_KEY
        )

    params: Dict[str, Any] = dict(dkim.get('params') or {})
    check_param_names(params)

    builder = (create_signing_config()
               .domain(params.get('d') or '')
               .selector(params.get('s') or '')
               .headers(params.get('h') or '')
               .algorithm(params.get('a') or DEFAULT_ALGORITHM)
               .version(str(params.get('v') or DEFAULT_VERSION))
               .private_key(private_key))

    return builder.build()


def validate_signing_config(config: SigningConfig) -> None:
    """
    Validate signing configuration.

    Args:
        config: Signing configuration to validate

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if not isinstance(config, SigningConfig):
        raise ConfigurationError(
            "Configuration must be SigningConfig instance",
            SigningErrorCodes.INVALID_CONFIG
        )

    params = config.params()
    missing = [key for key in REQUIRED_PARAMS if not params[key]]
    if missing:
        raise ConfigurationError(
            f"Missing required params: {', '.join(missing)}",
            SigningErrorCodes.MISSING_PARAM,
            {"missing_params": missing}
        )

    invalid = invalid_header_names(config.headers_to_sign)
    if invalid:
        raise ConfigurationError(
            f"Invalid header names in h=: {', '.join(invalid)}",
            SigningErrorCodes.INVALID_CONFIG,
            {"invalid_headers": list(invalid)}
        )

    if config.algorithm not in SUPPORTED_ALGORITHMS:
        raise ConfigurationError(
            f"Unsupported algorithm: {config.algorithm}",
            SigningErrorCodes.INVALID_CONFIG,
            {"supported_algorithms": list(SUPPORTED_ALGORITHMS)}
        )

    if config.private_key is None:
        raise ConfigurationError(
            "No private key given.",
            SigningErrorCodes.MISSING_PRIVATE_KEY
        )

    if not isinstance(config.private_key, rsa.RSAPrivateKey):
        raise ConfigurationError(
            "Invalid private key given.",
            SigningErrorCodes.INVALID_PRIVATE_KEY,
            {"type": type(config.private_key).__name__}
        )

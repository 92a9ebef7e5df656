"""
Tests for signing configuration building and configuration file loading
"""

import json

import pytest

from dkim_signer import (
    ConfigurationError,
    SigningConfig,
    SigningErrorCodes,
    DEFAULT_HEADERS_TO_SIGN,
    create_signing_config,
    config_from_options,
    load_options_from_json,
    load_options_from_file,
)
from dkim_signer.config import load_default_options
from dkim_signer.signing import apply_params, validate_signing_config


class TestSigningConfig:
    """Test the SigningConfig data class"""

    def test_headers_normalized(self):
        config = SigningConfig(
            domain="example.com",
            selector="sel1",
            headers_to_sign=["From", " TO ", "from", ""],
            private_key=None,
        )

        assert config.headers_to_sign == ("from", "to")
        assert config.header_list == "from:to"

    def test_string_headers_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            SigningConfig(domain="d", selector="s", headers_to_sign="from:to", private_key=None)

        assert exc_info.value.error_code == SigningErrorCodes.INVALID_CONFIG

    def test_params(self):
        config = SigningConfig(domain="d.example", selector="s1", headers_to_sign=("from",), private_key=None)

        assert config.params() == {'v': '1', 'a': 'rsa-sha1', 'd': 'd.example', 'h': 'from', 's': 's1'}


class TestSigningConfigBuilder:
    """Test the fluent configuration builder"""

    def test_build(self, key_pair):
        config = (create_signing_config()
                  .domain("example.com")
                  .selector("sel1")
                  .private_key(key_pair.key_body)
                  .add_header("Message-ID")
                  .build())

        assert config.headers_to_sign == DEFAULT_HEADERS_TO_SIGN + ("message-id",)
        assert config.private_key.key_size == 1024

    def test_headers_replace_defaults(self, key_pair):
        config = (create_signing_config()
                  .domain("example.com")
                  .selector("sel1")
                  .headers("from:subject")
                  .private_key(key_pair.private_key)
                  .build())

        assert config.headers_to_sign == ("from", "subject")
        assert config.private_key is key_pair.private_key

    def test_missing_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_signing_config().domain("example.com").selector("sel1").build()

        assert exc_info.value.error_code == SigningErrorCodes.MISSING_PRIVATE_KEY

    def test_missing_domain(self, key_pair):
        with pytest.raises(ConfigurationError) as exc_info:
            create_signing_config().selector("sel1").private_key(key_pair.private_key).build()

        assert exc_info.value.error_code == SigningErrorCodes.MISSING_PARAM
        assert exc_info.value.details["missing_params"] == ['d']

    def test_unsupported_algorithm(self, key_pair):
        builder = (create_signing_config()
                   .domain("example.com")
                   .selector("sel1")
                   .algorithm("rsa-sha256")
                   .private_key(key_pair.private_key))

        with pytest.raises(ConfigurationError) as exc_info:
            builder.build()

        assert exc_info.value.error_code == SigningErrorCodes.INVALID_CONFIG

    def test_invalid_header_name(self, key_pair):
        builder = (create_signing_config()
                   .domain("example.com")
                   .selector("sel1")
                   .headers(["from", "bad header"])
                   .private_key(key_pair.private_key))

        with pytest.raises(ConfigurationError) as exc_info:
            builder.build()

        assert exc_info.value.details["invalid_headers"] == ["bad header"]


class TestOptions:
    """Test options parsing and param updates"""

    def test_config_from_options(self, dkim_options):
        config = config_from_options(dkim_options)

        assert config.domain == "example.com"
        assert config.header_list == "from:to:subject"

    def test_optional_params(self, dkim_options):
        dkim_options['dkim']['params'].update({'v': 1, 'a': 'rsa-sha1'})

        config = config_from_options(dkim_options)

        assert config.version == "1"
        assert config.algorithm == "rsa-sha1"

    def test_missing_required_param(self, dkim_options):
        del dkim_options['dkim']['params']['s']

        with pytest.raises(ConfigurationError) as exc_info:
            config_from_options(dkim_options)

        assert exc_info.value.error_code == SigningErrorCodes.MISSING_PARAM

    def test_dkim_not_a_mapping(self):
        with pytest.raises(ConfigurationError) as exc_info:
            config_from_options({'dkim': 'yes'})

        assert exc_info.value.error_code == SigningErrorCodes.MISSING_DKIM_CONFIG

    def test_apply_params_returns_new_config(self, dkim_options):
        config = config_from_options(dkim_options)

        updated = apply_params(config, {'d': 'example.net', 'h': None})

        assert updated is not config
        assert updated.domain == "example.net"
        assert updated.headers_to_sign == ()
        assert config.domain == "example.com"
        assert updated.private_key is config.private_key

    def test_validate_rejects_other_types(self):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_signing_config({'d': 'example.com'})

        assert exc_info.value.error_code == SigningErrorCodes.INVALID_CONFIG

    def test_validate_rejects_non_rsa_key(self):
        config = SigningConfig(domain="d", selector="s", headers_to_sign=("from",), private_key="pem")

        with pytest.raises(ConfigurationError) as exc_info:
            validate_signing_config(config)

        assert exc_info.value.error_code == SigningErrorCodes.INVALID_PRIVATE_KEY


class TestConfigLoader:
    """Test JSON configuration loading"""

    def test_load_from_json(self, dkim_options):
        options = load_options_from_json(json.dumps(dkim_options))

        assert options == dkim_options

    def test_invalid_json(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_options_from_json("{not json")

        assert exc_info.value.error_code == SigningErrorCodes.PARSE_ERROR

    def test_non_object_json(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_options_from_json("[1, 2]")

        assert exc_info.value.error_code == SigningErrorCodes.PARSE_ERROR

    def test_load_from_file(self, tmp_path, dkim_options):
        path = tmp_path / "dkim.json"
        path.write_text(json.dumps(dkim_options))

        options = load_options_from_file(path)

        assert config_from_options(options).selector == "sel1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_options_from_file(tmp_path / "absent.json")

        assert exc_info.value.error_code == SigningErrorCodes.FILE_ERROR

    def test_private_key_file_relative_to_config(self, tmp_path, key_pair):
        (tmp_path / "keys").mkdir()
        (tmp_path / "keys" / "sel1.pem").write_bytes(key_pair.private_key_pem)
        path = tmp_path / "dkim.json"
        path.write_text(json.dumps({
            'dkim': {
                'private_key_file': 'keys/sel1.pem',
                'params': {'d': 'example.com', 'h': 'from', 's': 'sel1'},
            }
        }))

        options = load_options_from_file(path)

        assert 'private_key_file' not in options['dkim']
        config = config_from_options(options)
        assert config.private_key.private_numbers() == key_pair.private_key.private_numbers()

    def test_missing_private_key_file(self, tmp_path):
        path = tmp_path / "dkim.json"
        path.write_text(json.dumps({'dkim': {'private_key_file': 'nope.pem'}}))

        with pytest.raises(ConfigurationError) as exc_info:
            load_options_from_file(path)

        assert exc_info.value.error_code == SigningErrorCodes.FILE_ERROR

    def test_load_default_options(self, tmp_path, monkeypatch, dkim_options):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "dkim.json").write_text(json.dumps(dkim_options))

        options = load_default_options()

        assert options['dkim']['params']['d'] == "example.com"

    def test_no_default_options(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            load_default_options()

        assert exc_info.value.error_code == SigningErrorCodes.FILE_ERROR

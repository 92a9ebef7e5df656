"""
Tests for the dkim-signer command-line interface
"""

import json

from dkim_signer.cli import main, create_parser


MESSAGE = b"From: a@example.com\r\nTo: b@example.org\r\nSubject: Hi\r\n\r\nHello\n"


class TestParser:
    """Test argument parsing"""

    def test_sign_defaults(self):
        args = create_parser().parse_args(['sign', '--config', 'dkim.json'])

        assert args.command == 'sign'
        assert args.input == '-'
        assert args.output == '-'
        assert args.header_only is False

    def test_sign_config_optional(self):
        args = create_parser().parse_args(['sign'])

        assert args.config is None

    def test_no_command_shows_help(self, capsys):
        assert main([]) == 1
        assert "usage: dkim-signer" in capsys.readouterr().out


class TestKeygenCommand:
    """Test key generation"""

    def test_keygen_config_block(self, capsys):
        exit_code = main(['keygen', '--bits', '1024', '--domain', 'example.com', '--selector', 'sel1'])

        captured = capsys.readouterr()
        assert exit_code == 0
        config = json.loads(captured.out)
        assert config['dkim']['params'] == {'d': 'example.com', 'h': 'from:to:subject:date', 's': 'sel1'}
        assert "sel1._domainkey.example.com" in captured.err
        assert "v=DKIM1; k=rsa; p=" in captured.err

    def test_keygen_plain(self, capsys):
        exit_code = main(['keygen', '--bits', '1024'])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert out.startswith("Private Key:\n")
        assert "Public Key: " in out

    def test_keygen_domain_without_selector(self, capsys):
        assert main(['keygen', '--domain', 'example.com']) == 1
        assert "--selector" in capsys.readouterr().err

    def test_keygen_small_key(self, capsys):
        assert main(['keygen', '--bits', '512']) == 1
        assert "at least 1024" in capsys.readouterr().err


class TestSignCommand:
    """Test signing through the CLI"""

    def _write_config(self, tmp_path, dkim_options):
        path = tmp_path / "dkim.json"
        path.write_text(json.dumps(dkim_options))
        return path

    def test_sign_file(self, tmp_path, dkim_options):
        config = self._write_config(tmp_path, dkim_options)
        source = tmp_path / "message.eml"
        source.write_bytes(MESSAGE)
        target = tmp_path / "signed.eml"

        exit_code = main(['sign', '--config', str(config), '--input', str(source), '--output', str(target)])

        assert exit_code == 0
        signed = target.read_bytes()
        assert signed.startswith(b"DKIM-Signature: v=1; a=rsa-sha1; bh=")
        assert signed.endswith(b"\r\n\r\nHello\r\n")

    def test_sign_header_only(self, tmp_path, dkim_options):
        config = self._write_config(tmp_path, dkim_options)
        source = tmp_path / "message.eml"
        source.write_bytes(MESSAGE)
        target = tmp_path / "header.txt"

        exit_code = main(['sign', '--config', str(config), '--input', str(source),
                          '--output', str(target), '--header-only'])

        assert exit_code == 0
        header = target.read_bytes()
        assert header.startswith(b"DKIM-Signature: ")
        assert b"d=example.com; h=from:to:subject; s=sel1; b=" in header

    def test_missing_config(self, tmp_path, capsys):
        exit_code = main(['sign', '--config', str(tmp_path / "absent.json")])

        assert exit_code == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_incomplete_config(self, tmp_path, capsys):
        path = tmp_path / "dkim.json"
        path.write_text(json.dumps({'dkim': {'params': {'d': 'example.com'}}}))

        assert main(['sign', '--config', str(path)]) == 1
        assert "No 'private_key' given." in capsys.readouterr().err

    def test_missing_input(self, tmp_path, dkim_options, capsys):
        config = self._write_config(tmp_path, dkim_options)

        exit_code = main(['sign', '--config', str(config), '--input', str(tmp_path / "absent.eml")])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err

    def test_default_config_location(self, tmp_path, dkim_options, monkeypatch):
        """Without --config the default locations are searched"""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "dkim.json").write_text(json.dumps(dkim_options))
        (tmp_path / "message.eml").write_bytes(MESSAGE)

        exit_code = main(['sign', '--input', 'message.eml', '--output', 'header.txt', '--header-only'])

        assert exit_code == 0
        assert b"d=example.com;" in (tmp_path / "header.txt").read_bytes()

    def test_no_default_config(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        assert main(['sign']) == 1
        assert "Default configuration file not found" in capsys.readouterr().err

"""
Command-line interface for the DKIM signer
Signs raw messages from files or stdin and generates selector keys
"""

import argparse
import json
import logging
import sys
from typing import Optional

from . import __version__
from .config import DEFAULT_CONFIG_PATHS, load_options_from_file, load_default_options
from .crypto.rsa_keys import DEFAULT_KEY_SIZE, generate_key_pair, check_platform_compatibility
from .exceptions import DkimSignerError, ConfigurationError
from .signing import DkimSigner, sign_bytes


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='dkim-signer',
        description='Sign outgoing mail with a relaxed/RSA-SHA1 DKIM-Signature header'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'DKIM Signer {__version__}'
    )

    parser.add_argument(
        '--check-compatibility',
        action='store_true',
        help='Check that RSA-SHA1 signing works on this platform and exit'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_sign_parser(subparsers)
    setup_keygen_parser(subparsers)

    return parser


def setup_sign_parser(subparsers):
    """Setup sign subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Sign a raw RFC 5322 message')
    sign_parser.add_argument(
        '--config',
        help=('JSON configuration file with a "dkim" block (default: first of '
              + ', '.join(str(path) for path in DEFAULT_CONFIG_PATHS) + ')')
    )
    sign_parser.add_argument(
        '--input',
        default='-',
        help='Message file to sign (default: stdin)'
    )
    sign_parser.add_argument(
        '--output',
        default='-',
        help='Where to write the signed message (default: stdout)'
    )
    sign_parser.add_argument(
        '--header-only',
        action='store_true',
        help='Write only the DKIM-Signature header line'
    )


def setup_keygen_parser(subparsers):
    """Setup key generation subcommand."""
    keygen_parser = subparsers.add_parser('keygen', help='Generate an RSA key pair for a selector')
    keygen_parser.add_argument(
        '--bits',
        type=int,
        default=DEFAULT_KEY_SIZE,
        help=f'RSA modulus size (default: {DEFAULT_KEY_SIZE})'
    )
    keygen_parser.add_argument(
        '--domain',
        help='Signing domain; prints a ready-made config block when given with --selector'
    )
    keygen_parser.add_argument(
        '--selector',
        help='Selector the key will be published under'
    )
    keygen_parser.add_argument(
        '--headers',
        default='from:to:subject:date',
        help='h= value for the generated config block (default: from:to:subject:date)'
    )


def _read_input(path: str) -> bytes:
    if path == '-':
        return sys.stdin.buffer.read()
    with open(path, 'rb') as f:
        return f.read()


def _write_output(path: str, data: bytes) -> None:
    if path == '-':
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    with open(path, 'wb') as f:
        f.write(data)


def handle_sign_command(args) -> int:
    """Handle signing a message."""
    try:
        if args.config:
            options = load_options_from_file(args.config)
        else:
            options = load_default_options()
        signer = DkimSigner.from_options(options)

        raw_message = _read_input(args.input)
        signed = sign_bytes(raw_message, signer, header_only=args.header_only)
        _write_output(args.output, signed)
        return 0

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def handle_keygen_command(args) -> int:
    """Handle key pair generation."""
    if bool(args.domain) != bool(args.selector):
        print("Error: --domain and --selector must be given together", file=sys.stderr)
        return 1

    key_pair = generate_key_pair(args.bits)

    if args.domain:
        config = {
            'dkim': {
                'private_key': key_pair.key_body,
                'params': {
                    'd': args.domain,
                    'h': args.headers,
                    's': args.selector,
                },
            }
        }
        print(json.dumps(config, indent=2))
        print(f"TXT record for {args.selector}._domainkey.{args.domain}:", file=sys.stderr)
        print(key_pair.dns_txt_value(), file=sys.stderr)
        return 0

    print("Private Key:")
    print(key_pair.key_body)
    print(f"Public Key: {key_pair.public_key_b64}")
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        if args.check_compatibility:
            result = check_platform_compatibility()
            if result['rsa_sha1_supported']:
                print("✓ Platform supports RSA-SHA1 signing "
                      f"(cryptography {result['cryptography_version']})")
                return 0
            print(f"✗ RSA-SHA1 signing is not available: {result.get('error', 'unknown error')}")
            return 1

        if args.command == 'sign':
            return handle_sign_command(args)
        elif args.command == 'keygen':
            return handle_keygen_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except DkimSignerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

"""
Shared fixtures for the DKIM signer test suite
"""

import pytest

from dkim_signer import generate_key_pair, MailMessage, GenericHeader


@pytest.fixture(scope="session")
def key_pair():
    """One 1024-bit key pair for the whole run; key generation is slow."""
    return generate_key_pair(1024)


@pytest.fixture
def dkim_options(key_pair):
    """Options block matching the documented example configuration."""
    return {
        'dkim': {
            'private_key': key_pair.key_body,
            'params': {
                'd': 'example.com',
                'h': 'from:to:subject',
                's': 'sel1',
            },
        }
    }


@pytest.fixture
def message():
    """Simple outgoing message."""
    return MailMessage(
        headers=[
            GenericHeader('From', 'Alice <alice@example.com>'),
            GenericHeader('To', 'Bob <bob@example.org>'),
            GenericHeader('Subject', 'Quarterly   report'),
            GenericHeader('Date', 'Mon, 19 Oct 2026 10:00:00 +0000'),
        ],
        body=b"Hello Bob,\n\nthe report is attached.\n\n\n",
    )

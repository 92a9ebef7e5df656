"""Version information for the DKIM signer"""

__version__ = "0.1.0"

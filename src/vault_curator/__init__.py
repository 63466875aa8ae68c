"""Vault curator: build-aware cleanup recommendations for a Destiny 2 vault."""

__version__ = "0.1.0"

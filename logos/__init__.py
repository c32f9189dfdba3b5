"""Validator logos service: maps validator operator addresses to Keybase logos."""

__version__ = "0.1.0"

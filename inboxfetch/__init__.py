"""Fetch every message in a Gmail IMAP inbox and save each one as an .eml file."""

__version__ = "0.1.0"
__all__ = ["__version__"]
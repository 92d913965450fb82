"""ASA/PIX configuration expander."""

__version__ = "1.0.0"

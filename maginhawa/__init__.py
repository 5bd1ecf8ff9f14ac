"""Where In Maginhawa: place records, validation, and published indexes."""

__version__ = "0.1.0"

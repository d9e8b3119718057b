"""diffweight — semantic size analysis for Rust pull requests."""

__version__ = "0.1.0"

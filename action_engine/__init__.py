"""Intent dispatch engine for Google Assistant conversation actions."""

__version__ = "0.1.0"

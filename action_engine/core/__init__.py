"""Core configuration, logging, models, and exceptions."""

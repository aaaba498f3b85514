"""Log record splitting, matching, routing and configuration, with helper commands."""

__version__ = "0.1.0"
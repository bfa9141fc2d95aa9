"""HTTP service startup configuration and logging."""

__version__ = "0.1.0"

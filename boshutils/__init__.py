"""Command runner interfaces, file system helpers, UUID generation and worker pools."""

__version__ = "0.1.0"
"""Live per-page presence counts streamed over WebSockets."""

__version__ = "0.1.0"

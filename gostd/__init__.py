"""Go-style errors, in-memory streams, contexts, JSON helpers and file types."""

__version__ = "0.1.0"
__all__ = ["errors", "io", "context", "jsonenc", "osfile"]
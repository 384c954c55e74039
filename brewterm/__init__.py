"""Terminal input decoding, mouse parsing, rendering and helpers for text user interfaces."""

__version__ = "0.1.0"

__all__ = ["execution", "input", "keys", "logfile", "messages", "mouse", "options", "renderer"]
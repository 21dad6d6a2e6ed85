from enum import Enum


class ReaderState(Enum):
    """
    Lifecycle of a [`ScrollReader`][shardbridge.handlers.ScrollReader].
    """

    Created = "created"  # Constructed, settings not yet resolved.
    Initialized = "initialized"  # Settings merged and validated; no network traffic yet.
    Streaming = "streaming"  # Scroll open, pages are being pulled.
    Exhausted = "exhausted"  # The store reported no further pages.
    Failed = "failed"  # A fetch or decode error occurred.
    Closed = "closed"  # Resources released; terminal.

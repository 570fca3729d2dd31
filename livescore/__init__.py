"""Live football score board: in-memory match store, SSE fan-out and client."""

__version__ = "0.1.0"

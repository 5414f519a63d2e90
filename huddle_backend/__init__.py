"""In-memory huddle tracking and access-token issuance for real-time calls."""

__version__ = "0.1.0"

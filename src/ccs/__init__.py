"""Code Conversation Search — full-text search over coding assistant transcripts."""

__version__ = "0.1.0"

"""Chat proxy API: rate-limited Perplexity proxy with canned fallbacks."""

__version__ = "1.0.0"

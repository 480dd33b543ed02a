"""Core models shared across archext."""

"""Factory helpers for building providers and the engine application."""

"""Core helpers for wiring application components together."""

"""Core configuration, wiring and security helpers."""

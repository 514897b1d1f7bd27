"""Scripted chat simulator: persistent conversation log, simulated bots and a Litestar front end."""

__all__ = (
    "cli",
    "config",
    "lib",
    "schemas",
    "server",
    "services",
    "utils",
)

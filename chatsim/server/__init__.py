"""Litestar application wiring."""

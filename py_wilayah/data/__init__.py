"""Boundary data access."""

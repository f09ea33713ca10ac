"""Cinebook: movie ticket booking API."""

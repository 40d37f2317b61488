"""Shared translation catalogues consumed by the backend."""

"""Shared models and errors."""

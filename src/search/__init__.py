"""Normalization, scoring and search orchestration."""

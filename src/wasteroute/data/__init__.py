"""Seed and reference data loaders."""

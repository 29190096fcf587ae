"""Adapters (infrastructure layer)."""

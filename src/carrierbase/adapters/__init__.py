"""Adapters to databases and external services."""

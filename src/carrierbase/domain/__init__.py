"""Carrier registry domain."""

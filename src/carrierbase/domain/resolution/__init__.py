"""Matching candidates to carriers and merging their fields."""

from __future__ import annotations

from .merge import MergeOutcome, MergePolicy
from .resolver import IdentityResolver, Resolution

__all__ = ["IdentityResolver", "MergeOutcome", "MergePolicy", "Resolution"]

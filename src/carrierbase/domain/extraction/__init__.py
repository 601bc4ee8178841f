"""Extraction payload normalization into carrier candidates."""

from __future__ import annotations

from .confidence import CONFIDENCE_WEIGHTS, score_confidence
from .equipment import EQUIPMENT_SYNONYMS, normalize_equipment, scan_equipment
from .normalizer import ExtractionNormalizer, prepare_candidate
from .patterns import CandidateExtractor, RegexCandidateExtractor, ScannedIdentifiers

__all__ = [
    "CONFIDENCE_WEIGHTS",
    "EQUIPMENT_SYNONYMS",
    "CandidateExtractor",
    "ExtractionNormalizer",
    "RegexCandidateExtractor",
    "ScannedIdentifiers",
    "normalize_equipment",
    "prepare_candidate",
    "scan_equipment",
    "score_confidence",
]

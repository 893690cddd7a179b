"""Engine Layer - Recall Matching and Risk Scoring

This module provides the core matching engine, implementing:
- SearchField / FIELD_SPECS: field-kind dispatch table (normalizer, weight)
- compose_candidates: cross-product of filtered variants
- StagedMatcher: fixed-order staged store lookups per candidate
- FallbackScanner: full-scan partial match (last resort)
- calculate_risk_score / risk_level_from_score: deterministic risk scoring
- RecallSearchOrchestrator: main entry point for search execution
"""

from .candidate import SearchCandidate, compose_candidates
from .fallback_scanner import FallbackScanner
from .fields import FIELD_SPECS, FieldSpec, SearchField, normalize_for_field, record_value, significant_value
from .result import RecallSearchResult, SearchStatus
from .risk import RiskLevel, calculate_risk_score, risk_level_from_score
from .staged_matcher import StagedMatch, StagedMatcher
from .orchestrator import RecallSearchOrchestrator

__all__ = [
    "RecallSearchOrchestrator",
    "RecallSearchResult",
    "SearchStatus",
    "SearchField",
    "FieldSpec",
    "FIELD_SPECS",
    "normalize_for_field",
    "record_value",
    "significant_value",
    "SearchCandidate",
    "compose_candidates",
    "StagedMatcher",
    "StagedMatch",
    "FallbackScanner",
    "RiskLevel",
    "calculate_risk_score",
    "risk_level_from_score",
]

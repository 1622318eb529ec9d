"""
ScamRadar — Scam Risk Assessment Engine

Blends an external LLM's scam probability with a deterministic,
explainable indicator scan.

Public API:
  - CATALOG:                  Immutable indicator catalog
  - detect_indicators:        Pattern scan of combined free text
  - calculate_risk_percentage: Local/model risk blend (0-100)
  - extract_scam_indicators:  Fallback labels mined from explanations
  - ResponseCache:            Content-addressed TTL cache for model replies
  - analyze_submission:       Full pipeline (cache → LLM → detect → blend)
  - analyze_url:              Domain spoofing / suspicious URL checks
  - LLMProvider:              Abstract LLM interface for provider swapping

Usage:
    from scamradar import detect_indicators, calculate_risk_percentage
    detection = detect_indicators(text)
    percent = calculate_risk_percentage(detection.pattern_matches, detection, 60)
"""

__version__ = "1.0.0"

from scamradar.indicators import (
    CATALOG,
    CATALOG_VERSION,
    CatalogError,
    IndicatorCatalog,
    IndicatorDefinition,
    IndicatorId,
)
from scamradar.detector import (
    DetectionResult,
    IndicatorEvaluation,
    IndicatorMatch,
    detect_indicators,
)
from scamradar.scorer import (
    calculate_risk_percentage,
    local_risk_score,
    parse_probability,
    risk_level,
)
from scamradar.extractor import extract_scam_indicators
from scamradar.cache import ResponseCache, response_cache
from scamradar.analyzer import analyze_submission
from scamradar.domains import analyze_url
from scamradar.llm import LLMProvider
from scamradar.llm.factory import get_provider

__all__ = [
    "CATALOG",
    "CATALOG_VERSION",
    "CatalogError",
    "IndicatorCatalog",
    "IndicatorDefinition",
    "IndicatorId",
    "DetectionResult",
    "IndicatorEvaluation",
    "IndicatorMatch",
    "detect_indicators",
    "calculate_risk_percentage",
    "local_risk_score",
    "parse_probability",
    "risk_level",
    "extract_scam_indicators",
    "ResponseCache",
    "response_cache",
    "analyze_submission",
    "analyze_url",
    "LLMProvider",
    "get_provider",
]

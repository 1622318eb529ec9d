"""
Risk Score Calculator

Computes the 0-100 scam risk percentage from local detection plus the
external model's own probability. Separated from detector.py for
single-responsibility.

Local score:
  Start from severity-weighted detections, scaled against the catalog.
  Count boost:       5+ indicators=+15, 3+=+10, 2+=+5
  Severity floor:    any severity-5 indicator -> at least 75
  Financial floor:   credential/payment/remittance request -> at least 70
  Model fallback:    nothing detected but model says > 50 -> at least 55
Blend:
  3+ indicators: 70% local / 30% model, otherwise 50/50.

The step blend at 3 indicators and the constants below are tuning
values carried over for behavioral compatibility, not derived ones.
"""

from __future__ import annotations

import math
import re
from typing import Mapping, Optional

from scamradar.detector import DetectionResult, IndicatorMatch
from scamradar.indicators import (
    CATALOG,
    FINANCIAL_REQUEST_INDICATORS,
    IndicatorCatalog,
    IndicatorId,
)

CONFIDENCE_BOOST = 1.5
MIN_SEVERITY_DENOMINATOR = 28
SEVERITY_DENOMINATOR_SHARE = 0.3

COUNT_BOOSTS = ((5, 15), (3, 10), (2, 5))

MAX_SEVERITY_FLOOR = 75
FINANCIAL_REQUEST_FLOOR = 70
MODEL_FALLBACK_FLOOR = 55
MODEL_FALLBACK_TRIGGER = 50

STRONG_LOCAL_COUNT = 3
# (local, model) blend weights
STRONG_LOCAL_WEIGHTS = (0.7, 0.3)
DEFAULT_WEIGHTS = (0.5, 0.5)

# Half-open risk bands: [0,25) Low, [25,50) Moderate, [50,75) High, [75,100] Very High
RISK_BANDS = ((75, "Very High"), (50, "High"), (25, "Moderate"), (0, "Low"))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching Math.round."""
    return int(math.floor(value + 0.5))


def _coerce_percent(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return float(value)


def _score(
    pattern_matches: Optional[Mapping[IndicatorId, IndicatorMatch]],
    api_percent: object,
    catalog: IndicatorCatalog,
) -> tuple[int, dict]:
    """Run the full blend. Returns (final, breakdown)."""
    matches = dict(pattern_matches or {})
    api = _coerce_percent(api_percent)
    detected_count = len(matches)

    breakdown: dict = {
        "detected_count": detected_count,
        "total_severity": 0.0,
        "max_possible_severity": catalog.max_possible_severity,
        "base_score": 0,
        "count_boost": 0,
        "severity_floor_applied": False,
        "financial_floor_applied": False,
        "model_fallback_applied": False,
        "local_score": 0,
        "api_percent": api,
        "local_weight": 0.0,
    }

    local = 0
    max_possible = catalog.max_possible_severity
    if max_possible > 0:
        total = sum(
            m.severity * min(1.0, m.confidence * CONFIDENCE_BOOST)
            for m in matches.values()
        )
        breakdown["total_severity"] = round(total, 4)

        denominator = max(MIN_SEVERITY_DENOMINATOR, max_possible * SEVERITY_DENOMINATOR_SHARE)
        local = min(100, round_half_up(total / denominator * 100))
        breakdown["base_score"] = local

        for min_count, boost in COUNT_BOOSTS:
            if detected_count >= min_count:
                boosted = min(100, local + boost)
                breakdown["count_boost"] = boosted - local
                local = boosted
                break

        if any(m.severity >= 5 for m in matches.values()):
            breakdown["severity_floor_applied"] = local < MAX_SEVERITY_FLOOR
            local = max(local, MAX_SEVERITY_FLOOR)

        if any(i in FINANCIAL_REQUEST_INDICATORS for i in matches):
            breakdown["financial_floor_applied"] = local < FINANCIAL_REQUEST_FLOOR
            local = max(local, FINANCIAL_REQUEST_FLOOR)

    if detected_count == 0 and api > MODEL_FALLBACK_TRIGGER:
        breakdown["model_fallback_applied"] = local < MODEL_FALLBACK_FLOOR
        local = max(local, MODEL_FALLBACK_FLOOR)

    breakdown["local_score"] = local

    local_weight, model_weight = (
        STRONG_LOCAL_WEIGHTS if detected_count >= STRONG_LOCAL_COUNT else DEFAULT_WEIGHTS
    )
    breakdown["local_weight"] = local_weight

    final = round_half_up(local * local_weight + api * model_weight)
    final = max(0, min(100, final))
    breakdown["final_score"] = final
    return final, breakdown


def calculate_risk_percentage(
    pattern_matches: Optional[Mapping[IndicatorId, IndicatorMatch]],
    detection: Optional[DetectionResult],
    api_percent: object,
    catalog: Optional[IndicatorCatalog] = None,
) -> int:
    """
    Blend local detection with the model's probability into 0-100.

    Args:
        pattern_matches: Fired indicators (DetectionResult.pattern_matches).
        detection: The detection run; supplies the catalog when given.
        api_percent: The model's probability, 0-100. Non-numeric -> 0.
        catalog: Override the catalog used for max possible severity.
    """
    catalog = catalog or (detection.catalog if detection is not None else CATALOG)
    final, _ = _score(pattern_matches, api_percent, catalog)
    return final


def risk_breakdown(
    detection: DetectionResult,
    api_percent: object,
) -> dict:
    """Every step of the blend, for display and debugging."""
    _, breakdown = _score(detection.pattern_matches, api_percent, detection.catalog)
    return breakdown


def local_risk_score(detection: DetectionResult, api_percent: object = 0) -> int:
    """The local score before it is blended with the model probability."""
    _, breakdown = _score(detection.pattern_matches, api_percent, detection.catalog)
    return breakdown["local_score"]


def risk_level(percent: float) -> str:
    """Map a percentage onto its half-open risk band."""
    for lower, label in RISK_BANDS:
        if percent >= lower:
            return label
    return "Low"


# ============================================================
# PROBABILITY PARSING
# ============================================================

_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")
_PERCENT = re.compile(r"(\d+(?:\.\d+)?)%")


def parse_probability(value: object) -> float:
    """
    Read a model probability into 0-100.

    Accepts numbers, "75%", "75", and ranges like "75-100%" (mean of
    the two ends). Anything unreadable is 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return _clamp(_coerce_percent(value))
    if not isinstance(value, str) or not value:
        return 0.0

    if "-" in value:
        low, _, high = value.partition("-")
        ends = []
        for part in (low, high):
            m = _NUMBER.search(part)
            ends.append(float(m.group(1)) if m else 0.0)
        return _clamp((ends[0] + ends[1]) / 2)

    m = _PERCENT.search(value) or _NUMBER.search(value)
    return _clamp(float(m.group(1))) if m else 0.0


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))

"""
Indicator Detector

Scans a content string against the indicator catalog and reports,
for every indicator, whether it fired, how confident the match is,
and how many of its patterns were found.

Detection is deterministic and pure: the catalog is read-only and
each call builds a fresh evaluation map, so concurrent callers never
see each other's state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from scamradar.indicators import (
    CATALOG,
    IndicatorCatalog,
    IndicatorDefinition,
    IndicatorId,
)

# Confidence needed to fire, by severity band
HIGH_SEVERITY_CUTOFF = 4
HIGH_SEVERITY_THRESHOLD = 0.10
DEFAULT_THRESHOLD = 0.15


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class IndicatorEvaluation:
    """Per-run detection state for one indicator."""
    detected: bool = False
    confidence: float = 0.0
    matches: int = 0


@dataclass(frozen=True)
class IndicatorMatch:
    """A fired indicator, as consumed by the risk blender."""
    severity: int
    confidence: float
    matches: int


@dataclass
class DetectionResult:
    """Output of one detect_indicators() run."""
    evaluations: dict[IndicatorId, IndicatorEvaluation]
    pattern_matches: dict[IndicatorId, IndicatorMatch] = field(default_factory=dict)
    catalog: IndicatorCatalog = field(default=CATALOG, repr=False, compare=False)

    @property
    def detected_count(self) -> int:
        return len(self.pattern_matches)

    def detected_ids(self) -> list[IndicatorId]:
        """Fired indicators, highest severity first, catalog order on ties."""
        order = {d.id: i for i, d in enumerate(self.catalog)}
        return sorted(
            self.pattern_matches,
            key=lambda i: (-self.pattern_matches[i].severity, order[i]),
        )

    def detected_names(self) -> list[str]:
        return [self.catalog[i].name for i in self.detected_ids()]

    def to_dict(self) -> dict:
        """Name-keyed view of every evaluation, for API responses."""
        return {
            self.catalog[i].name: {
                "detected": ev.detected,
                "confidence": round(ev.confidence, 4),
                "matches": ev.matches,
                "severity": self.catalog[i].severity,
            }
            for i, ev in self.evaluations.items()
        }


# ============================================================
# DETECTION
# ============================================================

def detection_threshold(severity: int) -> float:
    """High-severity indicators fire on weaker textual evidence."""
    if severity >= HIGH_SEVERITY_CUTOFF:
        return HIGH_SEVERITY_THRESHOLD
    return DEFAULT_THRESHOLD


def _count_hits(content: str, definition: IndicatorDefinition) -> int:
    hits = 0
    for matcher in definition.matchers:
        if isinstance(matcher, str):
            if matcher in content:
                hits += 1
        elif matcher.search(content):
            hits += 1
    return hits


def detect_indicators(
    content: object,
    catalog: IndicatorCatalog = CATALOG,
) -> DetectionResult:
    """
    Evaluate content against every indicator in the catalog.

    Args:
        content: Combined free text (explanation, user input, media
            analysis). Anything that is not a string counts as empty.
        catalog: The indicator catalog. Never modified.

    Returns:
        DetectionResult with an evaluation per indicator and a
        pattern_matches table holding only the fired ones.
    """
    text = content.lower() if isinstance(content, str) else ""

    evaluations: dict[IndicatorId, IndicatorEvaluation] = {}
    pattern_matches: dict[IndicatorId, IndicatorMatch] = {}

    for definition in catalog:
        evaluation = IndicatorEvaluation()
        evaluations[definition.id] = evaluation
        if not text:
            continue

        hits = _count_hits(text, definition)
        confidence = hits / len(definition.patterns)

        if confidence >= detection_threshold(definition.severity):
            evaluation.detected = True
            evaluation.confidence = confidence
            evaluation.matches = hits
            pattern_matches[definition.id] = IndicatorMatch(
                severity=definition.severity,
                confidence=confidence,
                matches=hits,
            )

    return DetectionResult(
        evaluations=evaluations,
        pattern_matches=pattern_matches,
        catalog=catalog,
    )


def build_content(*parts: object) -> str:
    """Join the available free-text fields the way detection expects."""
    return " ".join(p if isinstance(p, str) else "" for p in parts).lower()

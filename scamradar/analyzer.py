"""
Analyzer — Assessment Orchestrator

Runs one submission through the whole pipeline:
  1. Response cache lookup (fingerprint of text + media)
  2. Gemini call on a miss, normalized and cached
  3. Local indicator detection over explanation + input + media text
  4. Risk blend of local detection with the model's probability
  5. Fallback phrase mining when no catalog indicator fired

The cache lock is never held across the model call. Two identical
concurrent submissions may both miss and both call the model; the
second store simply overwrites the first.
"""

from __future__ import annotations

import time
from typing import Any, Optional

from scamradar.cache import ResponseCache, response_cache
from scamradar.detector import DetectionResult, build_content, detect_indicators
from scamradar.domains import analyze_url, extract_urls
from scamradar.extractor import display_labels, extract_scam_indicators
from scamradar.indicators import CATALOG, CATALOG_VERSION
from scamradar.llm import LLMProvider, MediaPart
from scamradar.logging import get_logger
from scamradar.scorer import (
    calculate_risk_percentage,
    parse_probability,
    risk_breakdown,
    risk_level,
)

logger = get_logger("analyzer")


# ============================================================
# LLM PROMPT
# ============================================================

ANALYSIS_PROMPT = """Analyze the following submission to determine if it is a scam. The user is likely in the Philippines.

{media_note}

Text to analyze: "{content}"

Pay close attention to:
- URL/domain tricks: typosquatting, homograph characters, unusual TLDs for known brands, URL shorteners.
- Urgency and threats, generic greetings, poor grammar, unexpected attachments or links.
- Requests for passwords, OTPs, card details or identification.
- Too-good-to-be-true prizes, investment, romance, job-offer and loan schemes.
- Impersonation of government agencies, banks, couriers, tech support or known companies.
- Lack of context and unsolicited contact.
If several indicators are present, raise the risk accordingly.

Respond with a single JSON object and nothing else:
{{
  "is_scam": boolean,
  "probability": number from 0 to 100,
  "confidence": "Low" | "Medium" | "High",
  "risk_level": "Low" | "Moderate" | "High" | "Very High",
  "explanation": "detailed English explanation (3-5 sentences) of WHY it is or isn't a scam",
  "explanation_tagalog": "the same explanation in Tagalog",
  "advice": "specific, actionable advice about this submission",
  "tips": ["five general tips for avoiding scams"],
  "where_to_report": [{{"name": "agency", "url": "https://..."}}],
  "image_analysis": "what the image shows and why it matters (empty if no image)",
  "audio_analysis": "what the recording says and why it matters (empty if no audio)"
}}"""

DEFAULT_REPORTING_AGENCIES = [
    {"name": "Philippine National Police Anti-Cybercrime Group (PNP ACG)", "url": "https://www.pnpacg.ph/"},
    {"name": "National Bureau of Investigation Cybercrime Division (NBI CCD)", "url": "https://www.nbi.gov.ph/cybercrime/"},
    {"name": "Department of Trade and Industry (DTI)", "url": "https://www.dti.gov.ph/konsyumer/complaints/"},
    {"name": "National Privacy Commission (NPC)", "url": "https://www.privacy.gov.ph/complaints-assisted/"},
]


def _media_note(image: Optional[MediaPart], audio: Optional[MediaPart]) -> str:
    notes = []
    if image is not None:
        notes.append("An image is attached: read any text in it and judge it as part of the submission.")
    if audio is not None:
        notes.append("An audio recording is attached: transcribe it and judge what is said.")
    return "\n".join(notes) or "No media is attached."


# ============================================================
# RESPONSE NORMALIZATION
# ============================================================

def _str(value: Any, default: str = "") -> str:
    return value.strip() if isinstance(value, str) and value.strip() else default


def normalize_response(raw: Any) -> dict:
    """
    Map a model reply onto the fields the rest of the app relies on.

    Only `probability` and `explanation` carry meaning for scoring;
    everything else is passed through for display with defaults.
    """
    raw = raw if isinstance(raw, dict) else {}

    probability = parse_probability(
        raw.get("probability", raw.get("scam_probability"))
    )

    tips = raw.get("tips", raw.get("how_to_avoid_scams"))
    if not isinstance(tips, list):
        tips = ["Refer to official sources for scam avoidance tips."]

    agencies = raw.get("where_to_report")
    if isinstance(agencies, list):
        agencies = [
            {"name": _str(a.get("name"), "Unknown"), "url": _str(a.get("url", a.get("link")), "#")}
            for a in agencies if isinstance(a, dict)
        ]
    if not agencies:
        agencies = list(DEFAULT_REPORTING_AGENCIES)

    is_scam = raw.get("is_scam")
    if not isinstance(is_scam, bool):
        is_scam = probability >= 50

    return {
        "is_scam": is_scam,
        "probability": probability,
        "confidence": _str(raw.get("confidence", raw.get("ai_confidence")), "N/A"),
        "risk_level": _str(raw.get("risk_level"), risk_level(probability)),
        "explanation": _str(
            raw.get("explanation", raw.get("explanation_english")),
            "No English explanation provided.",
        ),
        "explanation_tagalog": _str(
            raw.get("explanation_tagalog"), "No Tagalog explanation provided.",
        ),
        "advice": _str(raw.get("advice"), "No advice provided."),
        "tips": [t for t in tips if isinstance(t, str)],
        "where_to_report": agencies,
        "image_analysis": _str(raw.get("image_analysis")),
        "audio_analysis": _str(raw.get("audio_analysis")),
        "parse_error": False,
    }


def parse_error_response(error: Exception) -> dict:
    """Stand-in result when the model reply could not be parsed."""
    result = normalize_response({})
    result.update({
        "confidence": "N/A",
        "risk_level": "Unknown",
        "explanation": f"Error parsing response: {error}",
        "explanation_tagalog": "Hindi ma-parse ang tugon. Suriin ang raw response.",
        "advice": "Please try again. If the problem persists, review the submission manually.",
        "tips": ["Exercise caution."],
        "parse_error": True,
    })
    return result


# ============================================================
# SCORING
# ============================================================

def score_content(
    content: str,
    api_percent: float = 0,
    explanation: str = "",
    image_analysis: str = "",
    audio_analysis: str = "",
) -> tuple[DetectionResult, int, dict]:
    """Local detection + blend. No model call. Returns (detection, final, breakdown)."""
    combined = build_content(explanation, content, image_analysis, audio_analysis)
    detection = detect_indicators(combined, CATALOG)
    final = calculate_risk_percentage(detection.pattern_matches, detection, api_percent)
    return detection, final, risk_breakdown(detection, api_percent)


def indicator_rows(detection: DetectionResult) -> list[dict]:
    """Detected indicators, most severe first, ready for display."""
    rows = []
    for indicator_id in detection.detected_ids():
        match = detection.pattern_matches[indicator_id]
        rows.append({
            "id": indicator_id.value,
            "name": CATALOG[indicator_id].name,
            "category": CATALOG[indicator_id].category,
            "severity": match.severity,
            "confidence": round(match.confidence, 4),
            "matches": match.matches,
        })
    return rows


def build_assessment(
    content: str,
    model_result: dict,
    cached: bool = False,
) -> dict:
    """Combine a normalized model result with local detection."""
    api_percent = model_result.get("probability", 0)
    explanation = model_result.get("explanation", "")

    detection, final, breakdown = score_content(
        content,
        api_percent=api_percent,
        explanation=explanation,
        image_analysis=model_result.get("image_analysis", ""),
        audio_analysis=model_result.get("audio_analysis", ""),
    )

    indicators = indicator_rows(detection)
    extracted = extract_scam_indicators(explanation)
    fallback = display_labels(extracted) if not indicators else []

    return {
        "content": content,
        "risk_percentage": final,
        "risk_level": risk_level(final),
        "api_percent": api_percent,
        "indicators": indicators,
        "fallback_indicators": fallback,
        "extracted_phrases": extracted,
        "url_analyses": [analyze_url(u).to_dict() for u in extract_urls(content)],
        "score_breakdown": breakdown,
        "model_result": model_result,
        "cached": cached,
        "catalog_version": CATALOG_VERSION,
    }


# ============================================================
# FULL PIPELINE
# ============================================================

async def analyze_submission(
    content: str,
    llm: LLMProvider,
    image: Optional[MediaPart] = None,
    audio: Optional[MediaPart] = None,
    cache: ResponseCache = response_cache,
) -> dict:
    """
    Assess one submission end to end.

    Provider failures (network, quota, missing key) propagate to the
    caller. An unparseable model reply yields a parse-error result
    that is scored but not cached.
    """
    content = content if isinstance(content, str) else ""
    image_bytes = image.data if image else None
    audio_bytes = audio.data if audio else None
    start = time.time()

    model_result = await cache.get(content, image_bytes, audio_bytes)
    cached = model_result is not None

    if not cached:
        prompt = ANALYSIS_PROMPT.format(
            media_note=_media_note(image, audio),
            content=content,
        )
        media = [m for m in (image, audio) if m is not None]
        try:
            raw = await llm.generate_json(prompt, temperature=0.2, media=media or None)
        except ValueError as e:
            logger.warning("Unparseable model response: %s", e)
            model_result = parse_error_response(e)
        else:
            model_result = normalize_response(raw)
            await cache.set(content, model_result, image_bytes, audio_bytes)

    assessment = build_assessment(content, model_result, cached=cached)

    logger.info(
        "Assessment complete",
        extra={
            "risk_percentage": assessment["risk_percentage"],
            "api_percent": assessment["api_percent"],
            "indicators_count": len(assessment["indicators"]),
            "cache_hit": cached,
            "duration_ms": int((time.time() - start) * 1000),
        },
    )
    return assessment

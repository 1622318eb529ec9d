"""
API Schemas — Request and Response Models

Pydantic models for the ScamRadar API.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, model_validator


# ============================================================
# ANALYZE
# ============================================================

class AnalyzeRequest(BaseModel):
    """POST /analyze request body."""
    content: str = Field("", max_length=50_000,
                         description="Suspicious text: SMS, email, chat message, URL.")
    image_base64: Optional[str] = Field(None, description="Base64-encoded screenshot or photo.")
    image_mime_type: str = Field("image/jpeg", pattern=r"^image/[\w.+-]+$")
    audio_base64: Optional[str] = Field(None, description="Base64-encoded voice recording.")
    audio_mime_type: str = Field("audio/mpeg", pattern=r"^audio/[\w.+-]+$")

    model_config = {"json_schema_extra": {"examples": [
        {"content": "URGENT: Your account will be closed! Click here to verify: bit.ly/x1"},
    ]}}

    @model_validator(mode="after")
    def _require_something(self):
        if not self.content.strip() and not self.image_base64 and not self.audio_base64:
            raise ValueError("Provide content, an image, or an audio clip.")
        return self


class ScoreRequest(BaseModel):
    """POST /score request body — local scoring only."""
    content: str = Field(..., max_length=50_000)
    api_percent: float = Field(0, ge=0, le=100,
                               description="Externally supplied scam probability, 0-100.")
    explanation: str = Field("", max_length=50_000)


class IndicatorResponse(BaseModel):
    id: str
    name: str
    category: str
    severity: int
    confidence: float
    matches: int


class UrlAnalysisResponse(BaseModel):
    original_url: str
    clean_domain: str
    is_legitimate_domain: bool
    institution: Optional[str] = None
    is_potential_spoofing: bool
    spoofing_target: Optional[str] = None
    spoofing_technique: Optional[str] = None
    spoofing_similarity_score: Optional[float] = None
    has_suspicious_patterns: bool
    risk_score: float
    risk_label: str


class ReportingAgency(BaseModel):
    name: str
    url: str


class ModelResult(BaseModel):
    is_scam: bool
    probability: float
    confidence: str
    risk_level: str
    explanation: str
    explanation_tagalog: str
    advice: str
    tips: list[str]
    where_to_report: list[ReportingAgency]
    image_analysis: str = ""
    audio_analysis: str = ""
    parse_error: bool = False


class AssessmentResponse(BaseModel):
    """POST /analyze response body."""
    content: str
    risk_percentage: int
    risk_level: str
    api_percent: float
    indicators: list[IndicatorResponse]
    fallback_indicators: list[str]
    extracted_phrases: list[str]
    url_analyses: list[UrlAnalysisResponse]
    score_breakdown: dict
    model_result: ModelResult
    cached: bool
    catalog_version: str


class ScoreResponse(BaseModel):
    """POST /score response body."""
    risk_percentage: int
    risk_level: str
    local_score: int
    indicators: list[IndicatorResponse]
    evaluations: dict[str, dict]
    score_breakdown: dict
    catalog_version: str


# ============================================================
# URL
# ============================================================

class UrlAnalyzeRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=2_048)


# ============================================================
# CATALOG
# ============================================================

class IndicatorDefinitionResponse(BaseModel):
    id: str
    name: str
    category: str
    severity: int
    pattern_count: int


class CatalogResponse(BaseModel):
    catalog_version: str
    total: int
    max_possible_severity: int
    indicators: list[IndicatorDefinitionResponse]


# ============================================================
# CACHE
# ============================================================

class CacheStatsResponse(BaseModel):
    size: int
    max_size: int
    hit_rate: float
    total_requests: int
    hits: int
    misses: int


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    catalog_version: str
    llm_provider: str
    llm_configured: bool
    cache_entries: int
    admin_auth_enabled: bool

"""
Domain Analysis — URL Spoofing and Suspicious Link Checks

Deterministic checks for links found in submitted content:
  - Is the domain a known Philippine bank / e-wallet?
  - Does it imitate one (dash/dot insertion, TLD swap, typo)?
  - Does it match a known phishing URL shape?

Each URL gets a 0.0-1.0 risk score. No network access.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from typing import Optional

LEGITIMATE_PH_FINANCIAL_DOMAINS: dict[str, str] = {
    "landbank.com": "Land Bank of the Philippines",
    "landbank.ph": "Land Bank of the Philippines",
    "lbp-remittance.com": "Land Bank of the Philippines",
    "bpi.com.ph": "Bank of the Philippine Islands",
    "bdo.com.ph": "Banco de Oro",
    "metrobank.com.ph": "Metropolitan Bank and Trust Company",
    "pnb.com.ph": "Philippine National Bank",
    "rcbc.com": "Rizal Commercial Banking Corporation",
    "securitybank.com": "Security Bank",
    "unionbankph.com": "UnionBank of the Philippines",
    "eastwestbanker.com": "EastWest Bank",
    "chinabank.ph": "China Banking Corporation",
    "psbank.com.ph": "Philippine Savings Bank",
    "maybank.com.ph": "Maybank Philippines",
    "bsp.gov.ph": "Bangko Sentral ng Pilipinas",
    "gcash.com": "GCash",
    "paymaya.com": "PayMaya/Maya",
    "coins.ph": "Coins.ph",
    "philippinenationalbank.com": "Philippine National Bank",
    "pbcom.com.ph": "Philippine Bank of Communications",
    "robinsonsbank.com.ph": "Robinsons Bank",
}

SUSPICIOUS_URL_PATTERNS: tuple[re.Pattern[str], ...] = (
    # URL shorteners
    re.compile(r"bit\.ly", re.I),
    re.compile(r"tinyurl", re.I),
    re.compile(r"goo\.gl", re.I),
    re.compile(r"ow\.ly", re.I),
    # Suspicious TLDs
    re.compile(r"\.(xyz|info|tk|ml|ga|cf|gq|top)", re.I),
    # Raw IP addresses
    re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}"),
    re.compile(r"bank.*\.(info|xyz|online|site|tk)", re.I),
    re.compile(r"secure.*-.*site", re.I),
    re.compile(r"verify.*account", re.I),
    re.compile(r"sign.*in.*\.(com|net|org|info|xyz|online)", re.I),
    re.compile(r"authenticate", re.I),
    # Domain-dashes: bank.com-login.example
    re.compile(r"\.(com|net|org|ph)-[a-z0-9]+\.", re.I),
    # Excessive subdomains
    re.compile(r"([a-z0-9]+\.)+[a-z0-9]+\.[a-z0-9]+\.[a-z0-9]+", re.I),
    re.compile(r"online.*banking", re.I),
    re.compile(r"update.*account.*info", re.I),
    re.compile(r"security.*alert", re.I),
    re.compile(r"confirm.*identity", re.I),
    re.compile(r"account.*verification", re.I),
    re.compile(r"limited.*access", re.I),
    re.compile(r"suspended.*account", re.I),
)

MAX_TYPO_DISTANCE = 2

_URL_RE = re.compile(
    r"\b(?:https?://|www\.)[^\s<>\"')]+|\b[a-z0-9-]+(?:\.[a-z0-9-]+)*\.[a-z]{2,}(?:/[^\s<>\"')]*)?",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class SpoofingCheck:
    is_potential_spoofing: bool
    target_domain: Optional[str] = None
    target_institution: Optional[str] = None
    similarity_score: Optional[float] = None
    technique: Optional[str] = None


@dataclass(frozen=True)
class UrlAnalysis:
    original_url: str
    clean_domain: str
    is_legitimate_domain: bool
    institution: Optional[str]
    is_potential_spoofing: bool
    spoofing_target: Optional[str]
    spoofing_technique: Optional[str]
    spoofing_similarity_score: Optional[float]
    has_suspicious_patterns: bool
    risk_score: float

    @property
    def risk_label(self) -> str:
        return risk_label(self.risk_score)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["risk_label"] = self.risk_label
        return data


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(min(
                previous[j - 1] + (ca != cb),  # substitution
                current[j - 1] + 1,            # insertion
                previous[j] + 1,               # deletion
            ))
        previous = current
    return previous[-1]


def clean_domain(url: str) -> str:
    """Lower-case host part of a URL, without scheme or leading www."""
    cleaned = re.sub(r"^https?://", "", url.strip().lower())
    cleaned = re.sub(r"^www\.", "", cleaned)
    return cleaned.split("/")[0]


def is_legitimate_financial_domain(url: str) -> tuple[bool, Optional[str]]:
    """(True, institution) when the domain or a parent is a known institution."""
    domain = clean_domain(url)
    if domain in LEGITIMATE_PH_FINANCIAL_DOMAINS:
        return True, LEGITIMATE_PH_FINANCIAL_DOMAINS[domain]
    for known, institution in LEGITIMATE_PH_FINANCIAL_DOMAINS.items():
        if domain.endswith("." + known):
            return True, institution
    return False, None


def analyze_for_spoofing(url: str) -> SpoofingCheck:
    """Check whether a domain imitates a known financial institution."""
    domain = clean_domain(url)

    for known, institution in LEGITIMATE_PH_FINANCIAL_DOMAINS.items():
        base = known.split(".")[0]
        if base not in domain or domain == known:
            continue

        if f"{base}-" in domain or f"-{base}" in domain:
            technique, similarity = "dash-insertion", 0.8
        elif domain.startswith(f"{base}.") and not domain.startswith(f"{known}."):
            technique, similarity = "tld-replacement", 0.7
        elif f"{base}." in domain:
            technique, similarity = "dot-insertion", 0.9
        else:
            distance = levenshtein_distance(domain, known)
            if distance > MAX_TYPO_DISTANCE:
                continue
            technique = "character-substitution"
            similarity = 1 - distance / max(len(known), len(domain))

        return SpoofingCheck(
            is_potential_spoofing=True,
            target_domain=known,
            target_institution=institution,
            similarity_score=similarity,
            technique=technique,
        )

    return SpoofingCheck(is_potential_spoofing=False)


def has_suspicious_patterns(url: str) -> bool:
    return any(p.search(url) for p in SUSPICIOUS_URL_PATTERNS)


def url_risk_score(
    is_legitimate: bool,
    spoofing: SpoofingCheck,
    suspicious: bool,
) -> float:
    """0.0 (safe) to 1.0 (high risk)."""
    if is_legitimate:
        return 0.0
    score = 0.0
    if spoofing.is_potential_spoofing:
        score += 0.7
        if spoofing.similarity_score:
            score += 0.2 * spoofing.similarity_score
    if suspicious:
        score += 0.5
    return min(score, 1.0)


def risk_label(score: float) -> str:
    if score >= 0.8:
        return "Very High Risk"
    if score >= 0.6:
        return "High Risk"
    if score >= 0.3:
        return "Moderate Risk"
    return "Low Risk"


def analyze_url(url: str) -> UrlAnalysis:
    """Full analysis of one URL."""
    legitimate, institution = is_legitimate_financial_domain(url)
    spoofing = (
        analyze_for_spoofing(url) if not legitimate
        else SpoofingCheck(is_potential_spoofing=False)
    )
    suspicious = has_suspicious_patterns(url)

    return UrlAnalysis(
        original_url=url,
        clean_domain=clean_domain(url),
        is_legitimate_domain=legitimate,
        institution=institution,
        is_potential_spoofing=spoofing.is_potential_spoofing,
        spoofing_target=spoofing.target_institution,
        spoofing_technique=spoofing.technique,
        spoofing_similarity_score=spoofing.similarity_score,
        has_suspicious_patterns=suspicious,
        risk_score=url_risk_score(legitimate, spoofing, suspicious),
    )


def extract_urls(text: object, limit: int = 10) -> list[str]:
    """Pull distinct URL-looking tokens out of free text, in order."""
    if not isinstance(text, str):
        return []
    seen: list[str] = []
    for m in _URL_RE.finditer(text):
        url = m.group(0).rstrip(".,;:!?")
        if url and url not in seen:
            seen.append(url)
        if len(seen) >= limit:
            break
    return seen

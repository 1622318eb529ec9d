"""
Indicator Catalog — Immutable Scam Signal Definitions

The catalog defines:
  1. Which scam signals exist (one IndicatorId per signal)
  2. The literal phrases that evidence each signal
  3. How heavily each signal weighs on risk (severity 2-5)

The catalog is static data. Detection never writes to it: every
detection run allocates its own evaluation state (see detector.py).
All matchers are compiled here, once, when the module is imported.
A pattern that fails to compile is a catalog bug and raises
CatalogError at import time rather than during a request.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Union

# --- Catalog Version (stamped on every assessment) ---
CATALOG_VERSION = "1.0.0"

# Patterns at or below this length are matched as plain substrings.
SHORT_PATTERN_MAX_LEN = 3


class CatalogError(ValueError):
    """Raised when the indicator catalog is malformed."""


Matcher = Union[str, "re.Pattern[str]"]


# ============================================================
# DATA STRUCTURES
# ============================================================

class IndicatorId(enum.Enum):
    """Registered indicator keys. Display names live on the definition."""
    URGENT_ACTION = "urgent_action"
    SHORTENED_URL = "shortened_url"
    SUSPICIOUS_DOMAIN = "suspicious_domain"
    MISLEADING_LINK = "misleading_link"
    PERSONAL_DATA_REQUEST = "personal_data_request"
    FINANCIAL_INFO_REQUEST = "financial_info_request"
    TOO_GOOD_TO_BE_TRUE = "too_good_to_be_true"
    INVESTMENT_OPPORTUNITY = "investment_opportunity"
    NO_VERIFICATION = "no_verification"
    FAKE_VERIFICATION = "fake_verification"
    PAYMENT_UPFRONT = "payment_upfront"
    MONEY_LAUNDERING = "money_laundering"
    SUSPICIOUS_SENDER = "suspicious_sender"
    IMPERSONATION = "impersonation"
    GRAMMATICAL_ERRORS = "grammatical_errors"
    EXCESSIVE_FORMALITY = "excessive_formality"
    THREATENING_LANGUAGE = "threatening_language"
    ACCOUNT_ISSUE = "account_issue"
    UNEXPECTED_PACKAGE = "unexpected_package"
    JOB_OFFER_SCAM = "job_offer_scam"
    EMOTIONAL_MANIPULATION = "emotional_manipulation"
    CONFIDENTIALITY_REQUEST = "confidentiality_request"
    ATTACHMENT_THREAT = "attachment_threat"
    TECH_SUPPORT_SCAM = "tech_support_scam"
    REMITTANCE_SCAM = "remittance_scam"
    GOVERNMENT_IMPERSONATION = "government_impersonation"
    LOAN_SCAM = "loan_scam"
    TEXT_AND_CALL_SCAM = "text_and_call_scam"


def compile_pattern(pattern: str) -> Matcher:
    """
    Build the matcher for one catalog pattern.

    Short patterns (<= 3 chars) stay plain lower-cased substrings.
    Longer ones become word-bounded, case-insensitive regexes with
    every metacharacter escaped.
    """
    if not isinstance(pattern, str) or not pattern:
        raise CatalogError(f"Invalid indicator pattern: {pattern!r}")
    if len(pattern) <= SHORT_PATTERN_MAX_LEN:
        return pattern.lower()
    try:
        return re.compile(rf"\b{re.escape(pattern)}\b", re.IGNORECASE)
    except re.error as e:
        raise CatalogError(f"Pattern {pattern!r} failed to compile: {e}") from e


@dataclass(frozen=True)
class IndicatorDefinition:
    """
    A named scam signal. Immutable.

    `patterns` keeps the authoring order; `matchers` holds the
    precompiled form of each pattern in the same order.
    """
    id: IndicatorId
    name: str
    category: str
    severity: int
    patterns: tuple[str, ...]
    matchers: tuple[Matcher, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.patterns:
            raise CatalogError(f"Indicator {self.name!r} has no patterns")
        if not 1 <= self.severity <= 5:
            raise CatalogError(
                f"Indicator {self.name!r} severity {self.severity} out of range"
            )
        object.__setattr__(
            self, "matchers", tuple(compile_pattern(p) for p in self.patterns),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id.value,
            "name": self.name,
            "category": self.category,
            "severity": self.severity,
            "pattern_count": len(self.patterns),
        }


class IndicatorCatalog:
    """
    Ordered, read-only collection of indicator definitions.

    Safe to share across threads and requests. Iteration order is the
    authoring order, which detector output and tie-breaks rely on.
    """

    def __init__(self, definitions: list[IndicatorDefinition]):
        by_id: dict[IndicatorId, IndicatorDefinition] = {}
        names: set[str] = set()
        for d in definitions:
            if d.id in by_id:
                raise CatalogError(f"Duplicate indicator id: {d.id}")
            if d.name in names:
                raise CatalogError(f"Duplicate indicator name: {d.name!r}")
            by_id[d.id] = d
            names.add(d.name)
        self._definitions = tuple(definitions)
        self._by_id = by_id
        self._max_possible_severity = sum(d.severity for d in definitions)

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, indicator_id: object) -> bool:
        return indicator_id in self._by_id

    def __getitem__(self, indicator_id: IndicatorId) -> IndicatorDefinition:
        return self._by_id[indicator_id]

    @property
    def max_possible_severity(self) -> int:
        """Sum of every indicator's severity. Constant per catalog."""
        return self._max_possible_severity

    def by_name(self, name: str) -> IndicatorDefinition:
        for d in self._definitions:
            if d.name == name:
                return d
        raise KeyError(name)


# ============================================================
# THE CATALOG
# ============================================================

_DEFINITIONS: list[IndicatorDefinition] = [
    # --- Urgency Tactics ---
    IndicatorDefinition(
        id=IndicatorId.URGENT_ACTION,
        name="Urgent action required",
        category="urgency",
        severity=3,
        patterns=(
            "urgent", "immediate", "act now", "expire", "deadline",
            "limited time", "running out of time", "must respond", "24 hours",
            "few hours left", "time sensitive", "act fast", "hurry",
            "quick action", "promptly", "only today",
        ),
    ),

    # --- Link Manipulation ---
    IndicatorDefinition(
        id=IndicatorId.SHORTENED_URL,
        name="Shortened URL",
        category="links",
        severity=4,
        patterns=(
            "bit.ly", "goo.gl", "tinyurl", "t.co", "short url",
            "shortened link", "click here", "click this link",
            "follow this url", "redirect", "tiny.cc", "ow.ly", "is.gd",
            "buff.ly",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.SUSPICIOUS_DOMAIN,
        name="Suspicious domain",
        category="links",
        severity=4,
        patterns=(
            ".xyz", ".online", ".site", ".info", "strange url",
            "unusual domain", "misspelled domain", "lookalike domain",
            "resembles official",
            # Regex-looking but matched literally like every other pattern
            ".co ((?!m).)*$",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.MISLEADING_LINK,
        name="Misleading link",
        category="links",
        severity=4,
        patterns=(
            "click to validate", "click to verify", "click to restore",
            "click to unlock", "click to continue", "download now",
            "install now",
        ),
    ),

    # --- Data Collection ---
    IndicatorDefinition(
        id=IndicatorId.PERSONAL_DATA_REQUEST,
        name="Request for personal data",
        category="data_collection",
        severity=5,
        patterns=(
            "personal information", "credit card", "bank details", "password",
            "login", "social security", "credentials", "account number", "cvv",
            "pin number", "security questions", "answer verification",
            "card information", "banking details", "payment details",
            "send photo", "selfie", "identity verification", "id card",
            "verify your identity",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.FINANCIAL_INFO_REQUEST,
        name="Financial information request",
        category="data_collection",
        severity=5,
        patterns=(
            "bank account", "credit card number", "payment info", "financial",
            "transaction", "banking", "wire transfer", "transfer money",
            "gcash", "maya", "paymaya", "paypal", "western union", "money gram",
        ),
    ),

    # --- Financial Incentives ---
    IndicatorDefinition(
        id=IndicatorId.TOO_GOOD_TO_BE_TRUE,
        name="Too good to be true",
        category="incentives",
        severity=4,
        patterns=(
            "prize", "winner", "won", "lottery", "gift", "free", "million",
            "reward", "claim your", "bonus", "cash prize", "jackpot",
            "congratulations", "lucky winner", "lump sum", "special offer",
            "exclusive deal", "unclaimed", "inheritance", "big money",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.INVESTMENT_OPPORTUNITY,
        name="Investment opportunity",
        category="incentives",
        severity=4,
        patterns=(
            "investment", "high return", "guaranteed profit", "double your",
            "crypto", "bitcoin", "multiply your money", "passive income",
            "get rich", "financial freedom", "trading opportunity",
            "trading bot", "trading platform", "investment scheme",
            "high yield", "risk-free", "forex", "stock investment",
        ),
    ),

    # --- Verification Issues ---
    IndicatorDefinition(
        id=IndicatorId.NO_VERIFICATION,
        name="No verification",
        category="verification",
        severity=4,
        patterns=(
            "no verification", "without verification", "no need to verify",
            "bypass", "easy money", "quick money", "easy cash", "no checks",
            "skip verification", "no security check", "no background check",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.FAKE_VERIFICATION,
        name="Fake verification",
        category="verification",
        severity=4,
        patterns=(
            "security check", "account verification", "verify your account",
            "confirm your details", "authenticate your", "validate your",
            "verify your identity", "double check", "confirm your information",
            "needs verification", "one-time verification", "identity check",
        ),
    ),

    # --- Money Requests ---
    IndicatorDefinition(
        id=IndicatorId.PAYMENT_UPFRONT,
        name="Payment upfront",
        category="money_requests",
        severity=5,
        patterns=(
            "advance fee", "deposit required", "payment first", "send money",
            "wire transfer", "processing fee", "handling fee", "small fee",
            "nominal fee", "administrative cost", "registration fee",
            "shipping fee", "clearance fee", "lawyer fee", "tax payment",
            "upfront payment", "pay now to", "gcash", "paynow",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.MONEY_LAUNDERING,
        name="Money laundering scheme",
        category="money_requests",
        severity=5,
        patterns=(
            "transfer money", "move funds", "receive money", "deposit funds",
            "process payment", "money mule", "commission", "keep percentage",
            "handle transaction", "receive and forward", "reshipper",
            "package processor",
        ),
    ),

    # --- Trust Manipulation ---
    IndicatorDefinition(
        id=IndicatorId.SUSPICIOUS_SENDER,
        name="Suspicious sender",
        category="trust",
        severity=3,
        patterns=(
            "official", "bank", "support", "service", "admin", "security",
            "unusual email", "unfamiliar sender", "government",
            "tax authority", "tax office", "microsoft", "apple", "google",
            "amazon", "facebook", "netflix", "paypal", "customer service",
            "IT department", "help desk", "HR department",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.IMPERSONATION,
        name="Impersonation attempt",
        category="trust",
        severity=4,
        patterns=(
            "ceo", "executive", "boss", "manager", "director", "supervisor",
            "president", "friend", "family", "relative", "cousin", "sibling",
            "parent", "child", "loved one", "acquaintance", "colleague",
            "trusted", "authority figure",
        ),
    ),

    # --- Text Quality Issues ---
    IndicatorDefinition(
        id=IndicatorId.GRAMMATICAL_ERRORS,
        name="Grammatical errors",
        category="text_quality",
        severity=2,
        patterns=(
            "poor grammar", "spelling error", "typo", "badly written",
            "awkward language", "translation error", "broken english",
            "strange wording", "unusual phrasing", "odd language",
            "improper grammar", "language mistakes",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.EXCESSIVE_FORMALITY,
        name="Excessive formality",
        category="text_quality",
        severity=2,
        patterns=(
            "dear customer", "dear valued", "dear beneficiary", "dear user",
            "dear client", "dear account holder", "dear member",
            "to whom it may concern", "dear sir/madam", "greetings of the day",
            "esteemed customer",
        ),
    ),

    # --- Pressure Tactics ---
    IndicatorDefinition(
        id=IndicatorId.THREATENING_LANGUAGE,
        name="Threatening language",
        category="pressure",
        severity=4,
        patterns=(
            "threaten", "suspend", "block", "legal action", "lawsuit",
            "police", "risk", "danger", "warning", "terminate",
            "close account", "penalty", "fine", "restriction", "consequence",
            "violation", "limited access", "permanent ban", "criminal",
            "illegal activity", "unauthorized access", "reported",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.ACCOUNT_ISSUE,
        name="Account issue",
        category="pressure",
        severity=3,
        patterns=(
            "account problem", "security breach", "verify account",
            "unusual activity", "suspicious login", "unauthorized access",
            "locked account", "account suspended", "account disabled",
            "security alert", "suspicious activity", "unusual login",
            "login attempt", "security warning",
        ),
    ),

    # --- Deception Tactics ---
    IndicatorDefinition(
        id=IndicatorId.UNEXPECTED_PACKAGE,
        name="Unexpected package",
        category="deception",
        severity=3,
        patterns=(
            "package", "parcel", "delivery", "shipment", "courier",
            "tracking number", "undelivered", "failed delivery",
            "shipping issue", "customs", "delivery attempt",
            "waiting for pickup", "delivery fee", "import tax", "customs fee",
            "delivery service",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.JOB_OFFER_SCAM,
        name="Job offer scam",
        category="deception",
        severity=4,
        patterns=(
            "job offer", "employment", "work from home", "remote job",
            "flexible hours", "earn from home", "hiring", "position available",
            "job opportunity", "no experience", "easy job", "part-time",
            "full-time", "recruitment", "vacancy", "job opening",
            "high salary", "competitive pay",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.EMOTIONAL_MANIPULATION,
        name="Emotional manipulation",
        category="deception",
        severity=3,
        patterns=(
            "help me", "desperate", "trapped", "emergency", "accident",
            "hospital", "urgent help", "medical emergency", "life or death",
            "tragedy", "disaster", "crisis", "emotional appeal",
            "plea for help", "charitable", "donation", "funding",
            "support needed", "poverty",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.CONFIDENTIALITY_REQUEST,
        name="Confidentiality request",
        category="deception",
        severity=4,
        patterns=(
            "keep this private", "confidential", "secret", "don't tell",
            "between us", "discreet", "quiet", "hidden", "concealed",
            "no one should know", "don't share this", "tell no one",
            "private matter", "classified information",
        ),
    ),

    # --- Technical Deception ---
    IndicatorDefinition(
        id=IndicatorId.ATTACHMENT_THREAT,
        name="Attachment threat",
        category="technical",
        severity=4,
        patterns=(
            "attachment", "download", "open file", "view document",
            "check document", "see attached", "review attached", ".zip",
            ".exe", ".docx", ".pdf", ".apk", "macro", "enable content",
            "enable editing",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.TECH_SUPPORT_SCAM,
        name="Tech support scam",
        category="technical",
        severity=4,
        patterns=(
            "technical support", "virus", "malware", "infection",
            "computer problem", "security issue", "computer alert",
            "microsoft support", "apple support", "system error",
            "remote access", "tech help", "PC repair", "system scan",
        ),
    ),

    # --- Philippines-Specific Scams ---
    IndicatorDefinition(
        id=IndicatorId.REMITTANCE_SCAM,
        name="Remittance scam",
        category="philippines",
        severity=5,
        patterns=(
            "gcash", "paymaya", "maya", "cebuana", "palawan", "remittance",
            "padala", "western union", "mlhuillier", "money transfer",
            "send load", "pera padala", "cash pickup", "ofw", "overseas",
            "abroad", "pamilya", "kamag-anak",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.GOVERNMENT_IMPERSONATION,
        name="Government impersonation",
        category="philippines",
        severity=4,
        patterns=(
            "dole", "dswd", "sss", "philhealth", "pag-ibig", "bir", "nbi",
            "police", "pulis", "government", "ayuda", "assistance", "benefit",
            "relief", "subsidy", "voucher", "certificate", "clearance",
            "license", "barangay", "philpost", "postal service",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.LOAN_SCAM,
        name="Loan scam",
        category="philippines",
        severity=4,
        patterns=(
            "loan", "utang", "pautang", "low interest", "easy loan",
            "fast cash", "quick loan", "no collateral", "lending", "credit",
            "financing", "5-6", "sangla", "pawn", "approve", "disbursement",
            "cash loan",
        ),
    ),
    IndicatorDefinition(
        id=IndicatorId.TEXT_AND_CALL_SCAM,
        name="Text and call scam",
        category="philippines",
        severity=3,
        patterns=(
            "sim", "text", "message", "call", "globe", "smart", "dito", "tm",
            "sun", "tnt", "load", "promo", "data", "points", "rewards",
            # Listed twice; both entries count toward hits and the denominator
            "winner", "subscriber", "subscriber",
        ),
    ),
]


# Indicators whose presence means money or credentials are being asked for.
FINANCIAL_REQUEST_INDICATORS: frozenset[IndicatorId] = frozenset({
    IndicatorId.PERSONAL_DATA_REQUEST,
    IndicatorId.FINANCIAL_INFO_REQUEST,
    IndicatorId.PAYMENT_UPFRONT,
    IndicatorId.REMITTANCE_SCAM,
})


# ============================================================
# Built once at import, never mutated
# ============================================================

CATALOG = IndicatorCatalog(_DEFINITIONS)

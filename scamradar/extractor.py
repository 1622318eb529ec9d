"""
Phrase Extractor — Fallback Indicator Mining

When no catalog indicator fires, the model's free-text explanation is
mined for short labels the UI can show instead. Attempts run in order
and the first that yields anything wins:

  1. Bullet lines (•, -, *)
  2. Numbered lines ("1. ...")
  3. Sentences after an introduction phrase ("red flags include:")
  4. Clauses after a key phrase ("this message contains ...")
  5. The first three sentences

Every candidate is then shortened to a noun-phrase-sized label.
"""

from __future__ import annotations

import re

MAX_INDICATORS = 5
MAX_FALLBACK_SENTENCES = 3
MIN_CANDIDATE_LEN = 5
MIN_LABEL_LEN = 3
LABEL_WORDS = 4

INTRODUCTION_PHRASES = (
    "indicators include:", "red flags include:", "suspicious elements include:",
    "warning signs include:", "suspicious indicators include:",
    "concerning elements include:", "signs of a scam:", "scam indicators:",
    "suspicious patterns:", "red flags:", "concerning aspects:",
    "alarm bells include:", "suspicious factors:", "signs include:",
)

KEY_PHRASES = (
    "this message contains", "i detected", "this contains",
    "suspicious due to", "appears to be", "this shows signs of",
    "this is likely", "red flag is", "contains elements of",
)

CONNECTORS = (
    "contains", "presents", "includes", "with", "has", "showing",
    "claiming", "uses",
)

_BULLET = re.compile(r"[•\-*]([^•\-*\n]+)")
_BULLET_PREFIX = re.compile(r"^[•\-*]\s*")
_NUMBERED = re.compile(r"\d+\.\s+([^\n]+)")
_NUMBERED_PREFIX = re.compile(r"^\d+\.\s+")
_SENTENCE_SPLIT = re.compile(r"[.!?]")
_KEY_PHRASE_RES = tuple(
    re.compile(re.escape(p) + r"\s+([^.!?]+)[.!?]", re.IGNORECASE)
    for p in KEY_PHRASES
)
_CONNECTOR_RES = tuple(
    re.compile(c + r"\s+(\w+(?:\s+\w+){0,3})", re.IGNORECASE)
    for c in CONNECTORS
)
_PUNCT_SUFFIX = re.compile(r"[.,;:!?].*$", re.DOTALL)
_EDGE_NON_WORD = re.compile(r"^\W+|\W+$")


def _sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(text) if len(s.strip()) > MIN_CANDIDATE_LEN]


def _list_items(text: str) -> list[str]:
    items = []
    for m in _BULLET.finditer(text):
        item = _BULLET_PREFIX.sub("", m.group(0)).strip()
        if len(item) > MIN_CANDIDATE_LEN:
            items.append(item)
    for m in _NUMBERED.finditer(text):
        item = _NUMBERED_PREFIX.sub("", m.group(0)).strip()
        if len(item) > MIN_CANDIDATE_LEN:
            items.append(item)
    return items


def _after_introduction(text: str) -> list[str]:
    lowered = text.lower()
    for phrase in INTRODUCTION_PHRASES:
        index = lowered.find(phrase)
        if index == -1:
            continue
        sentences = _sentences(text[index + len(phrase):].strip())
        if sentences:
            return sentences[:MAX_INDICATORS]
    return []


def _after_key_phrases(text: str) -> list[str]:
    found = []
    for regex in _KEY_PHRASE_RES:
        m = regex.search(text)
        if m and m.group(1):
            found.append(m.group(1).strip())
    return found


def shorten(text: str, words: int = LABEL_WORDS) -> str:
    """First few words, cut at punctuation, non-word edges trimmed."""
    short = " ".join(text.split()[:words])
    short = _PUNCT_SUFFIX.sub("", short)
    return _EDGE_NON_WORD.sub("", short)


def _condense(candidate: str) -> str:
    for regex in _CONNECTOR_RES:
        m = regex.search(candidate)
        if m and len(m.group(1)) > MIN_CANDIDATE_LEN:
            return m.group(1).strip()
    return shorten(candidate)


def extract_scam_indicators(explanation: object) -> list[str]:
    """
    Mine up to five short indicator labels from a model explanation.

    Non-string or empty input gives an empty list.
    """
    if not isinstance(explanation, str) or not explanation:
        return []

    candidates = (
        _list_items(explanation)
        or _after_introduction(explanation)
        or _after_key_phrases(explanation)
        or _sentences(explanation)[:MAX_FALLBACK_SENTENCES]
    )

    labels: list[str] = []
    for candidate in candidates:
        label = _condense(candidate)
        if label in labels or len(label) <= MIN_LABEL_LEN:
            continue
        labels.append(label)
        if len(labels) == MAX_INDICATORS:
            break

    return [label[0].upper() + label[1:] for label in labels]


def display_labels(phrases: list[str], limit: int = 3) -> list[str]:
    """Shorten extracted phrases for badge display, keeping the first few."""
    labels = []
    for phrase in phrases[:limit]:
        short = shorten(phrase)
        if len(short) > MIN_LABEL_LEN:
            labels.append(short)
    return labels

"""
Tests for fallback phrase mining from model explanations.
"""

import pytest
from scamradar.extractor import display_labels, extract_scam_indicators, shorten


class TestExtractionOrder:
    def test_bullets(self):
        text = (
            "Red flags:\n"
            "• Urgent payment demand\n"
            "• Suspicious shortened link\n"
            "• Requests account password"
        )
        assert extract_scam_indicators(text) == [
            "Urgent payment demand",
            "Suspicious shortened link",
            "Requests account password",
        ]

    def test_numbered_items(self):
        text = "1. Unknown sender address\n2. Generic greeting text"
        assert extract_scam_indicators(text) == [
            "Unknown sender address",
            "Generic greeting text",
        ]

    def test_introduction_phrase(self):
        text = "This looks bad. Red flags include: fake lottery prize. Unverified sender number."
        assert extract_scam_indicators(text) == [
            "Fake lottery prize",
            "Unverified sender number",
        ]

    def test_key_phrase(self):
        assert extract_scam_indicators("This message contains a fake prize claim.") == [
            "A fake prize claim",
        ]

    def test_sentence_fallback(self):
        text = (
            "The sender is unknown to the recipient. The offer looks unrealistic today. "
            "Nothing else matters here. Final sentence ignored."
        )
        assert extract_scam_indicators(text) == [
            "The sender is unknown",
            "The offer looks unrealistic",
            "Nothing else matters here",
        ]


class TestCondensing:
    def test_connector_capture(self):
        assert extract_scam_indicators("• Message uses fake bank logos") == [
            "Fake bank logos",
        ]

    def test_duplicates_dropped(self):
        text = "• Urgent payment demand\n• Urgent payment demand"
        assert extract_scam_indicators(text) == ["Urgent payment demand"]

    def test_capped_at_five(self):
        text = "\n".join(f"• Distinct warning sign{c}" for c in "abcdefg")
        assert len(extract_scam_indicators(text)) == 5

    def test_shorten(self):
        assert shorten("Asks for your OTP code right now") == "Asks for your OTP"
        assert shorten("Fake link, then more") == "Fake link"


class TestEdgeCases:
    @pytest.mark.parametrize("value", ["", None, 12, ["• Urgent payment demand"]])
    def test_non_text_is_empty(self, value):
        assert extract_scam_indicators(value) == []


class TestDisplayLabels:
    def test_shortens_and_limits(self):
        phrases = [
            "Fake lottery prize claim here",
            "Unknown sender",
            "Pressure to act",
            "Never shown",
        ]
        assert display_labels(phrases) == [
            "Fake lottery prize claim",
            "Unknown sender",
            "Pressure to act",
        ]

    def test_drops_tiny_labels(self):
        assert display_labels(["OK", "Bad link"]) == ["Bad link"]

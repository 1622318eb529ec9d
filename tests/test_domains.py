"""
Tests for URL spoofing and suspicious link analysis.
"""

import pytest
from scamradar.domains import (
    analyze_for_spoofing,
    analyze_url,
    clean_domain,
    extract_urls,
    has_suspicious_patterns,
    is_legitimate_financial_domain,
    levenshtein_distance,
    risk_label,
)


class TestHelpers:
    def test_levenshtein(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_clean_domain(self):
        assert clean_domain("HTTPS://www.BDO.com.ph/login?x=1") == "bdo.com.ph"
        assert clean_domain("gcash.com") == "gcash.com"

    @pytest.mark.parametrize("score,label", [
        (0.0, "Low Risk"), (0.3, "Moderate Risk"), (0.6, "High Risk"), (0.8, "Very High Risk"),
    ])
    def test_risk_label(self, score, label):
        assert risk_label(score) == label


class TestLegitimateDomains:
    def test_exact(self):
        assert is_legitimate_financial_domain("https://www.bdo.com.ph") == (True, "Banco de Oro")

    def test_subdomain(self):
        assert is_legitimate_financial_domain("m.gcash.com") == (True, "GCash")

    def test_lookalike_suffix_not_legitimate(self):
        assert is_legitimate_financial_domain("fakegcash.com")[0] is False

    def test_legitimate_is_zero_risk(self):
        result = analyze_url("https://www.bdo.com.ph/login")
        assert result.is_legitimate_domain is True
        assert result.risk_score == 0.0
        assert result.risk_label == "Low Risk"


class TestSpoofing:
    def test_dash_insertion(self):
        check = analyze_for_spoofing("bdo-secure.com")
        assert check.is_potential_spoofing is True
        assert check.technique == "dash-insertion"
        assert check.target_institution == "Banco de Oro"

    def test_dot_insertion(self):
        check = analyze_for_spoofing("gcash.com.verify-login.xyz")
        assert check.technique == "dot-insertion"
        assert check.similarity_score == 0.9

    def test_tld_replacement(self):
        check = analyze_for_spoofing("gcash.net")
        assert check.technique == "tld-replacement"
        assert check.similarity_score == 0.7

    def test_subdomain_dot_insertion(self):
        assert analyze_for_spoofing("login.gcash.ph").technique == "dot-insertion"

    def test_character_substitution(self):
        check = analyze_for_spoofing("gcashh.com")
        assert check.technique == "character-substitution"
        assert check.similarity_score == pytest.approx(0.9)

    def test_unrelated_domain(self):
        assert analyze_for_spoofing("example.com").is_potential_spoofing is False


class TestUrlRisk:
    def test_dash_spoof_score(self):
        result = analyze_url("bdo-secure.com")
        assert result.risk_score == pytest.approx(0.86)
        assert result.risk_label == "Very High Risk"

    def test_spoof_plus_suspicious_capped(self):
        result = analyze_url("gcash.com.verify-login.xyz")
        assert result.has_suspicious_patterns is True
        assert result.risk_score == 1.0

    def test_shortener_only(self):
        result = analyze_url("bit.ly/abc123")
        assert result.is_potential_spoofing is False
        assert result.risk_score == 0.5
        assert result.risk_label == "Moderate Risk"

    def test_suspicious_patterns(self):
        assert has_suspicious_patterns("http://192.168.1.10/login")
        assert not has_suspicious_patterns("example.com")

    def test_to_dict(self):
        data = analyze_url("bdo-secure.com").to_dict()
        assert data["spoofing_technique"] == "dash-insertion"
        assert data["risk_label"] == "Very High Risk"


class TestExtractUrls:
    def test_finds_urls_in_order(self):
        text = "Visit bit.ly/abc123 now, or https://example.com/x."
        assert extract_urls(text) == ["bit.ly/abc123", "https://example.com/x"]

    def test_deduplicates(self):
        assert extract_urls("gcash.com and gcash.com") == ["gcash.com"]

    def test_limit(self):
        text = " ".join(f"site{i}.com" for i in range(20))
        assert len(extract_urls(text, limit=5)) == 5

    def test_non_string(self):
        assert extract_urls(None) == []

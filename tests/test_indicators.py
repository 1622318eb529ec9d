"""
Tests for the indicator catalog.

The catalog is shared by every request, so it has to be complete,
well-formed, and impossible to change after import.
"""

import dataclasses

import pytest
from scamradar.indicators import (
    CATALOG,
    CATALOG_VERSION,
    FINANCIAL_REQUEST_INDICATORS,
    CatalogError,
    IndicatorCatalog,
    IndicatorDefinition,
    IndicatorId,
    compile_pattern,
)


class TestCatalogShape:
    def test_version(self):
        assert CATALOG_VERSION == "1.0.0"

    def test_every_id_registered(self):
        assert len(CATALOG) == len(IndicatorId) == 28
        for indicator_id in IndicatorId:
            assert indicator_id in CATALOG

    def test_max_possible_severity(self):
        assert CATALOG.max_possible_severity == 107
        assert CATALOG.max_possible_severity == sum(d.severity for d in CATALOG)

    def test_names_unique(self):
        names = [d.name for d in CATALOG]
        assert len(names) == len(set(names))

    def test_authoring_order(self):
        ids = [d.id for d in CATALOG]
        assert ids[0] == IndicatorId.URGENT_ACTION
        assert ids[-1] == IndicatorId.TEXT_AND_CALL_SCAM

    def test_by_name(self):
        d = CATALOG.by_name("Remittance scam")
        assert d.id == IndicatorId.REMITTANCE_SCAM
        assert d.severity == 5

    def test_by_name_unknown(self):
        with pytest.raises(KeyError):
            CATALOG.by_name("Nonexistent")

    def test_financial_request_indicators_are_catalogued(self):
        for indicator_id in FINANCIAL_REQUEST_INDICATORS:
            assert indicator_id in CATALOG

    def test_to_dict(self):
        data = CATALOG[IndicatorId.SUSPICIOUS_DOMAIN].to_dict()
        assert data["id"] == "suspicious_domain"
        assert data["pattern_count"] == 10
        assert data["category"] == "links"


class TestImmutability:
    def test_definition_frozen(self):
        d = CATALOG[IndicatorId.URGENT_ACTION]
        with pytest.raises(dataclasses.FrozenInstanceError):
            d.severity = 1

    def test_patterns_are_tuples(self):
        for d in CATALOG:
            assert isinstance(d.patterns, tuple)
            assert len(d.matchers) == len(d.patterns)


class TestPatternCompilation:
    def test_short_pattern_is_substring(self):
        assert compile_pattern("TM") == "tm"
        assert compile_pattern("5-6") == "5-6"

    def test_long_pattern_escapes_metacharacters(self):
        matcher = compile_pattern("t.co")
        assert matcher.search("visit t.co/abc")
        assert not matcher.search("visit tXco/abc")

    def test_long_pattern_word_bounded(self):
        matcher = compile_pattern("suspend")
        assert matcher.search("we will suspend you")
        assert not matcher.search("your account is suspended")

    def test_long_pattern_case_insensitive(self):
        assert compile_pattern("IT department").search("the it department called")

    def test_empty_pattern_rejected(self):
        with pytest.raises(CatalogError):
            compile_pattern("")

    def test_non_string_pattern_rejected(self):
        with pytest.raises(CatalogError):
            compile_pattern(None)


class TestCatalogValidation:
    def _definition(self, **overrides):
        fields = dict(
            id=IndicatorId.URGENT_ACTION,
            name="Test",
            category="test",
            severity=3,
            patterns=("urgent",),
        )
        fields.update(overrides)
        return IndicatorDefinition(**fields)

    def test_no_patterns_rejected(self):
        with pytest.raises(CatalogError):
            self._definition(patterns=())

    def test_severity_out_of_range(self):
        with pytest.raises(CatalogError):
            self._definition(severity=6)

    def test_duplicate_id_rejected(self):
        with pytest.raises(CatalogError):
            IndicatorCatalog([self._definition(), self._definition(name="Other")])

    def test_duplicate_name_rejected(self):
        with pytest.raises(CatalogError):
            IndicatorCatalog([
                self._definition(),
                self._definition(id=IndicatorId.LOAN_SCAM),
            ])

"""
Tests for processing/header_matcher.py

Covers: normalization (case, punctuation, whitespace runs, empty input),
idempotence, exact-after-normalization matching, and every configured
synonym matching its own field.
"""

import pytest

from config.field_config import FIELD_SYNONYMS
from processing.header_matcher import is_blank_header, matches_field, normalize_header


# ═══════════════════════════════════════════════════════════════════════════
# Normalization
# ═══════════════════════════════════════════════════════════════════════════

class TestNormalizeHeader:
    def test_punctuation_and_double_space(self):
        assert normalize_header("Client  Email!") == "client email"

    def test_underscore(self):
        assert normalize_header("client_email") == "client email"

    def test_hyphen_becomes_space(self):
        assert normalize_header("E-Mail") == "e mail"

    def test_plain_word(self):
        assert normalize_header("email") == "email"

    def test_surrounding_whitespace_and_symbols(self):
        assert normalize_header("  --Service Date (UTC)--  ") == "service date utc"

    def test_digits_kept(self):
        assert normalize_header("Phone #2") == "phone 2"

    def test_empty_string(self):
        assert normalize_header("") == ""

    def test_none(self):
        assert normalize_header(None) == ""

    def test_only_symbols(self):
        assert normalize_header("***") == ""

    def test_non_ascii_letters_become_separators(self):
        """Only a-z and 0-9 survive; accented letters split words."""
        assert normalize_header("Café Name") == "caf name"

    @pytest.mark.parametrize("header", [
        "Client  Email!",
        "E-Mail",
        "  __Booking__Status__ ",
        "Amount ($)",
        "",
        "a\tb\nc",
        "ÀÉÎ",
        "Service.Date/Time",
    ])
    def test_idempotent(self, header):
        once = normalize_header(header)
        assert normalize_header(once) == once


class TestIsBlankHeader:
    @pytest.mark.parametrize("header", [None, "", "   ", "\t"])
    def test_blank(self, header):
        assert is_blank_header(header) is True

    def test_not_blank(self):
        assert is_blank_header(" Name ") is False


# ═══════════════════════════════════════════════════════════════════════════
# Matching
# ═══════════════════════════════════════════════════════════════════════════

class TestMatchesField:
    def test_exact_match(self):
        assert matches_field("Email", ["email"]) is True

    def test_match_after_normalization(self):
        assert matches_field("CLIENT-EMAIL", ["client email"]) is True

    def test_synonym_is_normalized_too(self):
        assert matches_field("Client Name", ["client_name"]) is True

    def test_no_substring_match(self):
        assert matches_field("Email Address 2", ["email address"]) is False

    def test_no_fuzzy_match(self):
        assert matches_field("E-Mail", ["email"]) is False

    def test_empty_header_never_matches(self):
        assert matches_field("", ["", "email"]) is False

    def test_empty_synonym_list(self):
        assert matches_field("Email", []) is False

    @pytest.mark.parametrize(
        "field_name,synonym",
        [
            (field_name, synonym)
            for field_name, synonyms in FIELD_SYNONYMS.items()
            for synonym in synonyms
        ],
    )
    def test_every_synonym_matches_its_field(self, field_name, synonym):
        assert matches_field(synonym, FIELD_SYNONYMS[field_name]) is True
        assert matches_field(synonym.upper(), FIELD_SYNONYMS[field_name]) is True

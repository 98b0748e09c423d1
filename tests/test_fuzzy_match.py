"""
Tests for utils/fuzzy_match.py

Covers: best_match thresholds and word reordering, and header suggestions
for fields the exact matcher left unmapped.
"""

from utils.fuzzy_match import best_match, suggest_header


class TestBestMatch:
    def test_word_order_ignored(self):
        match, score = best_match("Date Service", {"service date": "Service Date"})
        assert match == "Service Date"
        assert score == 100

    def test_below_threshold(self):
        assert best_match("Notes", {"service date": "Service Date"}) == (None, 0)

    def test_empty_inputs(self):
        assert best_match("", {"a": "A"}) == (None, 0)
        assert best_match("a", {}) == (None, 0)


class TestSuggestHeader:
    def test_hyphenated_email(self):
        header, score = suggest_header("clientEmail", ["E-Mail", "Notes"])
        assert header == "E-Mail"
        assert score >= 80

    def test_typo(self):
        header, _ = suggest_header("appointmentStatus", ["Apointment Status", "Team"])
        assert header == "Apointment Status"

    def test_no_suggestion(self):
        assert suggest_header("serviceDate", ["Notes", "Team"]) == (None, 0)

    def test_blank_headers_ignored(self):
        assert suggest_header("clientName", ["", "   "]) == (None, 0)

    def test_unknown_field(self):
        assert suggest_header("clientFax", ["Fax"]) == (None, 0)

"""
Tests for processing/import_validator.py

Covers: submit gate with complete / partial mappings, placeholder values,
and cleaning of the mapping sent to the backend.
"""

import pytest

from processing.column_mapper import auto_map
from processing.import_validator import can_submit, clean_mapping, missing_required_fields

_COMPLETE = {
    "clientName": "Name",
    "clientEmail": "Email",
    "serviceDate": "Date",
    "appointmentStatus": "Status",
}


class TestCanSubmit:
    def test_all_required_mapped(self):
        assert can_submit(_COMPLETE) is True

    def test_optional_fields_not_needed(self):
        assert can_submit(_COMPLETE) is True
        assert "clientPhone" not in _COMPLETE

    def test_name_and_email_only(self):
        result = auto_map(["Name", "Email"])
        assert can_submit(result.mapping) is False
        assert missing_required_fields(result.mapping) == ["serviceDate", "appointmentStatus"]

    @pytest.mark.parametrize("value", [None, "", "  ", "__select_placeholder__", "__not_mapped__"])
    def test_unmapped_values_block(self, value):
        mapping = dict(_COMPLETE, serviceDate=value)
        assert can_submit(mapping) is False
        assert missing_required_fields(mapping) == ["serviceDate"]

    def test_empty_mapping(self):
        assert can_submit({}) is False
        assert missing_required_fields({}) == [
            "clientName", "clientEmail", "serviceDate", "appointmentStatus",
        ]


class TestCleanMapping:
    def test_drops_placeholders(self):
        mapping = dict(_COMPLETE, clientPhone="__not_mapped__", amountCharged=None)
        assert clean_mapping(mapping) == _COMPLETE

    def test_keeps_optional_fields(self):
        mapping = dict(_COMPLETE, clientPhone="Mobile")
        assert clean_mapping(mapping)["clientPhone"] == "Mobile"

    def test_declaration_order(self):
        mapping = {"appointmentStatus": "S", "clientName": "N", "clientPhone": "P"}
        assert list(clean_mapping(mapping)) == ["clientName", "clientPhone", "appointmentStatus"]

    def test_ignores_unknown_keys(self):
        assert clean_mapping({"clientFax": "Fax"}) == {}

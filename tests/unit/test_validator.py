from __future__ import annotations

from serial_sheets.models.config_models import DuplicatePolicy
from serial_sheets.models.mismatch_record import MismatchReason
from serial_sheets.services.validator import shape_of, validate_values


def test_shape_of():
    assert shape_of("AB12") == "LLNN"
    assert shape_of("") == ""
    assert shape_of("x-9") == "LLN"
    # non-ASCII digits are letters for shape purposes
    assert shape_of("١2") == "LN"


def test_same_shape_values_pass():
    kept, mismatches = validate_values(["AB12", "AB13", "XY12"], group="G")
    assert kept == ["AB12", "AB13", "XY12"]
    assert mismatches == []


def test_length_mismatch_against_reference():
    _, mismatches = validate_values(["AB12", "ABC12"], group="G")
    assert len(mismatches) == 1
    assert mismatches[0].value == "ABC12"
    assert mismatches[0].reason is MismatchReason.LENGTH
    assert mismatches[0].group == "G"


def test_sequence_mismatch_when_length_matches():
    _, mismatches = validate_values(["AB12", "A112"])
    assert [(m.value, m.reason) for m in mismatches] == [("A112", MismatchReason.SEQUENCE)]


def test_single_value_is_never_validated():
    kept, mismatches = validate_values(["ONLY"])
    assert kept == ["ONLY"]
    assert mismatches == []


def test_duplicates_flagged_and_kept_by_default():
    kept, mismatches = validate_values(["SN1", "SN2", "SN1"])
    assert kept == ["SN1", "SN2", "SN1"]
    assert [(m.value, m.reason) for m in mismatches] == [("SN1", MismatchReason.DUPLICATE)]


def test_duplicates_dropped_silently():
    kept, mismatches = validate_values(
        ["SN1", "SN2", "SN1", "SN2"], duplicate_policy=DuplicatePolicy.DROP_SILENTLY
    )
    assert kept == ["SN1", "SN2"]
    assert mismatches == []


def test_validation_disabled_keeps_everything_without_diagnostics():
    kept, mismatches = validate_values(["A1", "LONGER", "A1"], validate=False)
    assert kept == ["A1", "LONGER", "A1"]
    assert mismatches == []


def test_duplicate_with_length_mismatch_reports_both():
    _, mismatches = validate_values(["AB12", "ABC", "ABC"])
    reasons = [(m.value, m.reason) for m in mismatches]
    assert reasons == [
        ("ABC", MismatchReason.LENGTH),
        ("ABC", MismatchReason.DUPLICATE),
        ("ABC", MismatchReason.LENGTH),
    ]

from __future__ import annotations

from pathlib import Path

import pytest

from propctl.properties.fields import MULTI_FIELDS, SINGLE_FIELDS, fields_for_mode
from propctl.properties.record import (
    MissingRequiredField,
    PropertiesFileNotFound,
    clean_value,
    extract_record,
    find_raw_value,
    parse_record,
    validate_record,
)

VALID = "artifactID=my-api\nversion=1.2.3\ngroupID=com.example\n"


def test_parse_record_reads_required_keys() -> None:
    record = parse_record("api.properties", VALID, MULTI_FIELDS)
    assert record.values == {"artifactID": "my-api", "version": "1.2.3", "groupID": "com.example"}
    assert record.missing() == []


def test_value_whitespace_is_removed_everywhere_by_default() -> None:
    text = "artifactID= a b c\nversion = 1.2.3 \ngroupID=\tcom.example\r\n"
    record = parse_record("api.properties", text, MULTI_FIELDS)
    assert record.get("artifactID") == "abc"
    assert record.get("version") == "1.2.3"
    assert record.get("groupID") == "com.example"


def test_edges_policy_keeps_inner_whitespace() -> None:
    record = parse_record("api.properties", "artifactID= a b c \n", MULTI_FIELDS, whitespace="edges")
    assert record.get("artifactID") == "a b c"


def test_first_occurrence_wins() -> None:
    text = "version=1.0.0\nversion=2.0.0\n"
    assert find_raw_value(text.split("\n"), "version") == "1.0.0"


def test_value_is_everything_after_first_equals() -> None:
    record = parse_record("api.properties", "artifactID=a=b\n", MULTI_FIELDS)
    assert record.get("artifactID") == "a=b"


def test_key_must_start_the_line_and_match_exactly() -> None:
    text = " artifactID=indented\nartifactIDX=other\n# artifactID=commented\nversions=9\n"
    record = parse_record("api.properties", text, MULTI_FIELDS)
    assert record.get("artifactID") == ""
    assert record.get("version") == ""


def test_unknown_keys_are_ignored() -> None:
    record = parse_record("api.properties", VALID + "owner=team-a\n", MULTI_FIELDS)
    assert set(record.values) == {"artifactID", "version", "groupID"}


def test_single_mode_reads_optional_test_id() -> None:
    record = parse_record("api.properties", VALID + "testID=smoke-1\n", SINGLE_FIELDS)
    assert record.get("testID") == "smoke-1"
    without = parse_record("api.properties", VALID, SINGLE_FIELDS)
    assert without.get("testID") == ""
    assert without.missing() == []


def test_missing_group_id_reports_found_values() -> None:
    record = parse_record("api.properties", "artifactID=my-api\nversion=1.2.3\n", MULTI_FIELDS)
    with pytest.raises(MissingRequiredField) as excinfo:
        validate_record(record)
    assert excinfo.value.missing == ["groupID"]
    assert excinfo.value.code == 1
    assert excinfo.value.kind == "missing_required_field"
    assert excinfo.value.record.get("artifactID") == "my-api"
    assert excinfo.value.record.get("version") == "1.2.3"


def test_whitespace_only_value_counts_as_missing() -> None:
    record = parse_record("api.properties", "artifactID=   \nversion=1\ngroupID=g\n", MULTI_FIELDS)
    assert record.missing() == ["artifactID"]


def test_extract_record_requires_file_in_tree(tmp_path: Path) -> None:
    with pytest.raises(PropertiesFileNotFound) as excinfo:
        extract_record("gone.properties", MULTI_FIELDS, repo_root=tmp_path)
    assert excinfo.value.code == 1
    assert "gone.properties" in str(excinfo.value)


def test_extract_record_is_idempotent(tmp_path: Path) -> None:
    (tmp_path / "api.properties").write_text(VALID, encoding="utf-8")
    first = extract_record("api.properties", MULTI_FIELDS, repo_root=tmp_path)
    second = extract_record("api.properties", MULTI_FIELDS, repo_root=tmp_path)
    assert first == second


def test_extract_record_hands_raw_text_to_on_read_before_validation(tmp_path: Path) -> None:
    (tmp_path / "api.properties").write_text("artifactID=my-api\nversion=1\n", encoding="utf-8")
    seen: list[str] = []
    with pytest.raises(MissingRequiredField) as excinfo:
        extract_record("api.properties", MULTI_FIELDS, repo_root=tmp_path, on_read=seen.append)
    assert seen == ["artifactID=my-api\nversion=1\n"]
    assert excinfo.value.record.get("artifactID") == "my-api"
    assert excinfo.value.missing == ["groupID"]


def test_clean_value_rejects_unknown_policy() -> None:
    with pytest.raises(ValueError):
        clean_value("x", "none")


def test_fields_for_mode() -> None:
    assert [spec.key for spec in fields_for_mode("multi")] == ["artifactID", "version", "groupID"]
    assert [spec.key for spec in fields_for_mode("single")][-1] == "testID"
    with pytest.raises(ValueError):
        fields_for_mode("both")

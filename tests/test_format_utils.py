"""
Tests for output formatting.
"""

import json

import pytest
import yaml

from gitremote.format_utils import (
    format_output,
    flatten_dict,
    get_format_from_env,
)

ROWS = [
    {"repo": "a", "status": "success", "latest_tag": "v1.0.0"},
    {"repo": "b", "status": "failed", "latest_tag": None,
     "errors": {"latest_tag": "no versions present"}},
]


class TestFormatOutput:

    def test_jsonl(self):
        lines = list(format_output(iter(ROWS), "jsonl"))
        assert [json.loads(line) for line in lines] == ROWS

    def test_json(self):
        (text,) = format_output(iter(ROWS), "json")
        assert json.loads(text) == ROWS

    def test_yaml(self):
        (text,) = format_output(iter(ROWS), "yaml")
        assert yaml.safe_load(text) == ROWS

    def test_csv_columns_in_first_seen_order(self):
        (text,) = format_output(iter(ROWS), "csv")
        lines = text.splitlines()
        assert lines[0] == "repo,status,latest_tag,errors.latest_tag"
        assert lines[2] == "b,failed,,no versions present"

    def test_tsv_selected_fields(self):
        (text,) = format_output(iter(ROWS), "tsv", ["repo", "status"])
        assert text.splitlines() == ["repo\tstatus", "a\tsuccess", "b\tfailed"]

    def test_csv_empty(self):
        assert list(format_output(iter([]), "csv")) == []

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            list(format_output(iter(ROWS), "xml"))


def test_flatten_dict():
    assert flatten_dict({"a": {"b": 1, "c": {"d": None}}, "e": 2}) == {"a.b": 1, "a.c.d": "", "e": 2}


def test_format_from_env(monkeypatch):
    monkeypatch.setenv("GITREMOTE_FORMAT", "TSV")
    assert get_format_from_env() == "tsv"
    monkeypatch.setenv("GITREMOTE_FORMAT", "xml")
    assert get_format_from_env("json") == "json"
    monkeypatch.delenv("GITREMOTE_FORMAT")
    assert get_format_from_env() == "jsonl"

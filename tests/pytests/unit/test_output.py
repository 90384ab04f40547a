"""
Unit tests for saltapi/output.py
"""

import io
import json

import pytest
import yaml

import saltapi.output
from saltapi.client import decode_results


@pytest.fixture
def ret():
    return decode_results('{"return": [{"web1": true, "web2": "line1\\nline2"}]}')


def _render(data, out):
    stream = io.StringIO()
    saltapi.output.display_output(data, out, stream=stream)
    return stream.getvalue()


@pytest.mark.parametrize(
    "name,outputter",
    [
        ("json", saltapi.output.JSONOutputter),
        ("yaml", saltapi.output.YamlOutputter),
        ("raw", saltapi.output.RawOutputter),
        ("txt", saltapi.output.TxtOutputter),
        ("nested", saltapi.output.Outputter),
        (None, saltapi.output.Outputter),
    ],
)
def test_get_outputter(name, outputter):
    assert type(saltapi.output.get_outputter(name)) is outputter


def test_yaml_output(ret):
    rendered = _render(ret, "yaml")
    assert yaml.safe_load(rendered) == {
        "return": [{"web1": True, "web2": "line1\nline2"}]
    }
    assert "!!python" not in rendered


def test_json_output(ret):
    assert json.loads(_render(ret, "json")) == ret


def test_json_output_unserializable():
    assert json.loads(_render({"obj": object()}, "json")) == {}


def test_raw_output():
    assert _render({"web1": True}, "raw") == "{'web1': True}\n"


def test_txt_output():
    rendered = _render({"web1": "line1\nline2", "web2": True}, "txt")
    assert rendered == "web1: line1\nweb1: line2\nweb2: True\n"


def test_txt_output_not_a_mapping():
    assert _render(["web1"], "txt") == "['web1']\n"

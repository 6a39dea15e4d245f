"""Tests for JSON parser."""

from reparai.utils.json_parser import JSONParser


def test_extract_json_simple():
    """Test extracting simple JSON."""
    text = '{"confidence": 0.4, "questions": []}'
    result = JSONParser.extract_json(text)
    assert result == {"confidence": 0.4, "questions": []}


def test_extract_json_in_code_block():
    """Test extracting JSON from code block."""
    text = 'Aqui esta:\n```json\n{"confidence": 0.9}\n```\nObrigado.'
    result = JSONParser.extract_json(text)
    assert result == {"confidence": 0.9}


def test_extract_json_surrounded_by_prose():
    text = 'Resultado: {"asset_type": "pia", "tags": {"a": 1}} fim'
    result = JSONParser.extract_json(text)
    assert result == {"asset_type": "pia", "tags": {"a": 1}}


def test_extract_json_ignores_top_level_arrays():
    assert JSONParser.extract_json("[1, 2, 3]") == {}


def test_extract_json_invalid():
    """Test extracting invalid JSON returns empty dict."""
    text = "not json at all"
    result = JSONParser.extract_json(text)
    assert result == {}


def test_extract_json_empty():
    assert JSONParser.extract_json("") == {}

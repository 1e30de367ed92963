import pytest

from src.core.decoding import decode, extract_json
from src.core.request_executor import AIServiceError, ErrorKind
from src.models.evaluation import EvaluationPayload


def test_extract_json_from_fenced_prose():
    text = 'Here you go:\n```json\n[{"a": 1}, {"a": 2}]\n```\nGood luck!'
    assert extract_json(text, "array") == [{"a": 1}, {"a": 2}]


def test_extract_json_skips_values_of_wrong_shape():
    text = 'Score [draft] follows {"score": 70, "feedback": "ok"}'
    assert extract_json(text, "object") == {"score": 70, "feedback": "ok"}


def test_extract_json_raises_when_missing():
    with pytest.raises(ValueError):
        extract_json("no json here", "array")


def test_decode_parse_error_tag():
    result = decode("I cannot answer that.", EvaluationPayload, "object")
    assert not result.ok
    assert result.error_kind == ErrorKind.PARSE_ERROR


def test_decode_invalid_response_tag():
    result = decode('{"score": "high", "feedback": "x", "strengths": [], "improvements": []}', EvaluationPayload, "object")
    assert not result.ok
    assert result.error_kind == ErrorKind.INVALID_RESPONSE

    with pytest.raises(AIServiceError) as exc_info:
        result.unwrap()
    assert exc_info.value.kind == ErrorKind.INVALID_RESPONSE


def test_decode_success():
    result = decode('{"score": 72.5, "feedback": "Good", "strengths": ["a"], "improvements": []}', EvaluationPayload, "object")
    assert result.ok
    assert result.unwrap().score == 72.5

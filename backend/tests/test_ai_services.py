import pytest

from app.services import evaluation_service, facial_service, openai_client, transcription_service


def test_mock_evaluation_payload():
    result = evaluation_service.evaluate_answer("Sample Question", "My answer")
    assert result == {
        "correctness": 85,
        "completeness": 78,
        "clarity": 82,
        "suggestions": ["Add more details", "Be more concise"],
    }
    result["suggestions"].append("mutated")
    assert evaluation_service.MOCK_EVALUATION["suggestions"] == ["Add more details", "Be more concise"]


def test_evaluation_requires_answer():
    with pytest.raises(ValueError):
        evaluation_service.evaluate_answer("Q", "   ")


def test_mock_transcription_and_empty_audio():
    assert transcription_service.transcribe(b"\x00\x01")["transcript"] == "User transcript text"
    with pytest.raises(ValueError):
        transcription_service.transcribe(b"")


def test_facial_analysis_is_static():
    first = facial_service.analyze_facial("abc")
    second = facial_service.analyze_facial(None)
    assert first["confidence"] == 85
    assert first["eyeContact"] == 80
    assert first["emotions"]["happy"] == 45
    assert first["frame_received"] is True
    assert second["frame_received"] is False


def test_openai_evaluation_parses_fenced_json(monkeypatch: pytest.MonkeyPatch):
    class _Response:
        output_text = 'Here you go:\n```json\n{"correctness": 140, "completeness": 60, "clarity": "70", "suggestions": "Use an example"}\n```'

    class _Responses:
        def create(self, *args, **kwargs):
            return _Response()

    class _Client:
        responses = _Responses()

    monkeypatch.setattr(openai_client, "live_ai_enabled", lambda: True)
    monkeypatch.setattr(openai_client, "get_client", lambda: _Client())

    result = evaluation_service.evaluate_answer("Q", "A")
    assert result == {"correctness": 100, "completeness": 60, "clarity": 70, "suggestions": ["Use an example"]}


def test_openai_failures_fall_back_to_mock(monkeypatch: pytest.MonkeyPatch):
    class _Boom:
        def __getattr__(self, name):
            raise RuntimeError("forced")

    monkeypatch.setattr(openai_client, "live_ai_enabled", lambda: True)
    monkeypatch.setattr(openai_client, "get_client", lambda: _Boom())

    assert evaluation_service.evaluate_answer("Q", "A")["correctness"] == 85
    transcript = transcription_service.transcribe(b"audio")
    assert transcript == {"transcript": "User transcript text", "source": "mock"}


def test_extract_json_dict_variants():
    assert evaluation_service._extract_json_dict('{"a": 1}') == {"a": 1}
    assert evaluation_service._extract_json_dict("noise {\"b\": 2} noise") == {"b": 2}
    assert evaluation_service._extract_json_dict("no json here") is None
    assert evaluation_service._extract_json_dict("") is None

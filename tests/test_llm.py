import pytest

from data_designer_originality import llm as llm_module
from data_designer_originality.errors import LLMResponseError
from data_designer_originality.llm import GeminiClient, client_from_env, extract_json, extract_ratio, is_configured
from data_designer_originality.orchestrator import check_originality
from data_designer_originality.quality import fallback_text_analysis


class _Response:
    def __init__(self, text):
        self.text = text


class _Models:
    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []

    def generate_content(self, model, contents):
        self.requests.append((model, contents))
        return _Response(self.replies.pop(0))


class _FakeGenaiClient:
    def __init__(self, *replies):
        self.models = _Models(replies)


class TestParsing:
    def test_extract_json_from_wrapped_reply(self):
        reply = 'Here you go:\n```json\n{"readability": 80, "suggestions": ["a"]}\n```'
        assert extract_json(reply) == {"readability": 80, "suggestions": ["a"]}

    def test_extract_json_without_object(self):
        with pytest.raises(LLMResponseError):
            extract_json("I cannot help with that.")

    def test_extract_json_malformed(self):
        with pytest.raises(LLMResponseError):
            extract_json("{not json}")

    def test_extract_ratio(self):
        assert extract_ratio("0.75") == 0.75
        assert extract_ratio("Similarity: 3.5") == 1.0
        assert extract_ratio("no number here") == 0.0
        assert extract_ratio("") == 0.0

    def test_is_configured(self):
        assert is_configured("abc123")
        assert not is_configured("")
        assert not is_configured(None)
        assert not is_configured("your-gemini-api-key-here")


class TestGeminiClient:
    def test_generate_uses_model(self):
        fake = _FakeGenaiClient("hello")
        client = GeminiClient("key", model="gemini-test", client=fake)
        assert client.generate("prompt") == "hello"
        assert fake.models.requests == [("gemini-test", "prompt")]

    def test_analyze_text(self):
        fake = _FakeGenaiClient('{"readability": 90, "grammar": 85, "structure": 70, "clarity": 88}')
        client = GeminiClient("key", client=fake)
        assert client.analyze_text("Some prose.")["grammar"] == 85
        assert "Some prose." in fake.models.requests[0][1]

    def test_analyze_code_includes_language(self):
        fake = _FakeGenaiClient('{"quality": 70}')
        client = GeminiClient("key", client=fake)
        assert client.analyze_code("print(1)", language="python") == {"quality": 70}
        assert "```python" in fake.models.requests[0][1]

    def test_similarity_truncates_inputs(self):
        fake = _FakeGenaiClient("0.4")
        client = GeminiClient("key", client=fake)
        assert client.similarity("a" * 50, "b" * 50, excerpt_chars=10) == 0.4
        prompt = fake.models.requests[0][1]
        assert "a" * 10 in prompt and "a" * 11 not in prompt

    def test_feedback_prompt(self):
        fake = _FakeGenaiClient("Great job.")
        client = GeminiClient("key", client=fake)
        text = "Short sentence here. Another one follows."
        feedback = client.feedback(text, fallback_text_analysis(text), check_originality(text, []))
        assert feedback == "Great job."
        assert "writing instructor" in fake.models.requests[0][1]

    def test_empty_reply(self):
        client = GeminiClient("key", client=_FakeGenaiClient(None))
        assert client.generate("prompt") == ""


class TestClientFromEnv:
    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert client_from_env() is None

    def test_placeholder_key(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "your-gemini-api-key-here")
        assert client_from_env() is None

    def test_configured_key(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "real-key")
        created = {}

        class _Client:
            def __init__(self, api_key):
                created["api_key"] = api_key

        monkeypatch.setattr(llm_module.genai, "Client", _Client)
        client = client_from_env(model="gemini-test")
        assert client is not None
        assert client.model == "gemini-test"
        assert created == {"api_key": "real-key"}

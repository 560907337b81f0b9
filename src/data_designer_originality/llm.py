from __future__ import annotations

import json
import logging
import os
import re
from typing import TYPE_CHECKING, Any

from google import genai

from data_designer_originality.errors import LLMResponseError

if TYPE_CHECKING:
    from data_designer_originality.orchestrator import OriginalityReport
    from data_designer_originality.quality import CodeAnalysis, TextAnalysis

logger = logging.getLogger(__name__)

API_KEY_ENV = "GEMINI_API_KEY"
PLACEHOLDER_API_KEY = "your-gemini-api-key-here"
DEFAULT_MODEL = "gemini-2.5-flash"

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")
_NUMBER_RE = re.compile(r"(\d+\.?\d*)")

CODE_PROMPT = """\
You are an expert code reviewer. Analyze the following {language} code and score it.

Code:
```{language}
{code}
```

Give scores from 0-100 for quality, complexity, maintainability, performance and readability,
plus three specific suggestions, strengths and weaknesses.

Respond in JSON format:
{{"quality": number, "complexity": number, "maintainability": number, "performance": number,
"readability": number, "suggestions": [string], "strengths": [string], "weaknesses": [string]}}
"""

TEXT_PROMPT = """\
You are an expert writing reviewer. Analyze the following text and score it.

Text:
{text}

Give scores from 0-100 for readability, grammar, structure and clarity,
plus three specific suggestions, strengths and weaknesses.

Respond in JSON format:
{{"readability": number, "grammar": number, "structure": number, "clarity": number,
"suggestions": [string], "strengths": [string], "weaknesses": [string]}}
"""

SIMILARITY_PROMPT = """\
Calculate the similarity between these two texts on a scale of 0 to 1.
Consider semantic similarity, not just word overlap: similar ideas, structure and content patterns.

Text 1: {first}
Text 2: {second}

Respond with only a number between 0 and 1 (e.g., 0.75).
"""

FEEDBACK_PROMPT = """\
You are an expert {reviewer}. Write constructive feedback for a student's {content_type} submission.

Content (first 1000 characters):
{excerpt}

Analysis results:
{analysis}

Plagiarism detection: similarity score {plagiarism:.1f}%, AI-authorship score {ai:.1f}%.

Cover an overall assessment, key strengths, areas for improvement, specific recommendations,
next steps and encouragement. Keep it professional and friendly, 300-500 words.
"""


def is_configured(api_key: str | None) -> bool:
    return bool(api_key) and api_key != PLACEHOLDER_API_KEY


def extract_json(text: str) -> dict[str, Any]:
    """Return the first ``{...}`` block of an LLM reply as a dict."""
    match = _JSON_BLOCK_RE.search(text or "")
    if not match:
        raise LLMResponseError("No JSON found in response")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"Malformed JSON in response: {e}") from e
    if not isinstance(payload, dict):
        raise LLMResponseError("JSON payload is not an object")
    return payload


def extract_ratio(text: str) -> float:
    """Return the first number in an LLM reply clamped to [0, 1], or 0.0 if there is none."""
    match = _NUMBER_RE.search(text or "")
    if not match:
        return 0.0
    return max(0.0, min(1.0, float(match.group(1))))


class GeminiClient:
    """Thin wrapper over ``google.genai`` carrying the fixed prompt contract."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, client: Any = None) -> None:
        self.model = model
        self._client = client if client is not None else genai.Client(api_key=api_key)

    def generate(self, prompt: str) -> str:
        response = self._client.models.generate_content(model=self.model, contents=prompt)
        return response.text or ""

    def analyze_code(self, code: str, language: str = "javascript") -> dict[str, Any]:
        return extract_json(self.generate(CODE_PROMPT.format(language=language, code=code)))

    def analyze_text(self, text: str) -> dict[str, Any]:
        return extract_json(self.generate(TEXT_PROMPT.format(text=text)))

    def similarity(self, first: str, second: str, excerpt_chars: int = 1000) -> float:
        prompt = SIMILARITY_PROMPT.format(first=first[:excerpt_chars], second=second[:excerpt_chars])
        return extract_ratio(self.generate(prompt))

    def feedback(self, content: str, analysis: CodeAnalysis | TextAnalysis, report: OriginalityReport) -> str:
        is_code = analysis.kind == "code"
        excerpt = content[:1000] + ("..." if len(content) > 1000 else "")
        prompt = FEEDBACK_PROMPT.format(
            reviewer="code reviewer" if is_code else "writing instructor",
            content_type="code" if is_code else "document",
            excerpt=excerpt,
            analysis=json.dumps(analysis.to_payload(), indent=2),
            plagiarism=report.plagiarism_score * 100,
            ai=report.ai_score * 100,
        )
        return self.generate(prompt)


def client_from_env(model: str = DEFAULT_MODEL) -> GeminiClient | None:
    """Build a client from ``GEMINI_API_KEY``, or return None when no usable key is set."""
    api_key = os.environ.get(API_KEY_ENV)
    if not is_configured(api_key):
        logger.info(f"{API_KEY_ENV} not configured, local scorers only")
        return None
    return GeminiClient(api_key, model=model)

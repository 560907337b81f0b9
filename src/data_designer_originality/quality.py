# Submission quality analysis: LLM payload validation plus the local
# heuristics used when no LLM is available, and the Markdown feedback report.

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from data_designer_originality.orchestrator import OriginalityReport

_FUNCTION_RE = re.compile(r"function\s+\w+|const\s+\w+\s*=\s*\(")
_COMMENT_RE = re.compile(r"//|/\*|\*")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_SHOUTING_RE = re.compile(r"[.!?]{2,}|[A-Z]{3,}")

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CodeAnalysis:
    quality: float
    complexity: float
    maintainability: float
    performance: float
    readability: float
    suggestions: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    kind: str = field(default="code", init=False)

    @property
    def overall(self) -> float:
        return (self.quality + self.complexity + self.maintainability + self.performance + self.readability) / 5

    def to_payload(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class TextAnalysis:
    readability: float
    grammar: float
    structure: float
    clarity: float
    suggestions: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    kind: str = field(default="text", init=False)

    @property
    def overall(self) -> float:
        return (self.readability + self.grammar + self.structure + self.clarity) / 4

    def to_payload(self) -> dict[str, object]:
        return asdict(self)


# ---------------------------------------------------------------------------
# LLM payloads
# ---------------------------------------------------------------------------


def _metric(payload: dict[str, Any], key: str) -> float:
    try:
        value = float(payload.get(key) or 0)
    except (TypeError, ValueError):
        value = 0.0
    return max(0.0, min(100.0, value))


def _string_list(payload: dict[str, Any], key: str) -> list[str]:
    value = payload.get(key) or []
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def code_analysis_from_payload(payload: dict[str, Any]) -> CodeAnalysis:
    return CodeAnalysis(
        quality=_metric(payload, "quality"),
        complexity=_metric(payload, "complexity"),
        maintainability=_metric(payload, "maintainability"),
        performance=_metric(payload, "performance"),
        readability=_metric(payload, "readability"),
        suggestions=_string_list(payload, "suggestions"),
        strengths=_string_list(payload, "strengths"),
        weaknesses=_string_list(payload, "weaknesses"),
    )


def text_analysis_from_payload(payload: dict[str, Any]) -> TextAnalysis:
    return TextAnalysis(
        readability=_metric(payload, "readability"),
        grammar=_metric(payload, "grammar"),
        structure=_metric(payload, "structure"),
        clarity=_metric(payload, "clarity"),
        suggestions=_string_list(payload, "suggestions"),
        strengths=_string_list(payload, "strengths"),
        weaknesses=_string_list(payload, "weaknesses"),
    )


# ---------------------------------------------------------------------------
# Local heuristics
# ---------------------------------------------------------------------------


def fallback_code_analysis(code: str) -> CodeAnalysis:
    """Score code from line, function, and comment counts."""
    lines = len(code.split("\n"))
    functions = len(_FUNCTION_RE.findall(code))
    comments = len(_COMMENT_RE.findall(code))
    complexity = min(100.0, functions * 10 + lines / 10)

    return CodeAnalysis(
        quality=round(max(60.0, 100 - complexity / 2)),
        complexity=round(complexity),
        maintainability=round(max(50.0, 100 - lines / 20)),
        performance=round(max(70.0, 100 - functions * 5)),
        readability=round(min(100.0, max(60.0, 100 - lines / 15 + comments * 2))),
        suggestions=[
            "Add comments where the intent of a block is not obvious",
            "Split long functions into smaller, named steps",
            "Keep naming conventions consistent across the file",
            "Handle error paths explicitly",
        ],
        strengths=[
            "Code is organized into recognizable units",
            "Function sizes are mostly manageable",
        ],
        weaknesses=[
            "Error handling could be more thorough",
            "Some logic would benefit from documentation",
        ],
    )


def fallback_text_analysis(text: str) -> TextAnalysis:
    """Score prose from sentence length, paragraphing, and punctuation noise."""
    words = len(text.split())
    sentences = len(_SENTENCE_SPLIT_RE.split(text))
    paragraphs = len(_PARAGRAPH_SPLIT_RE.split(text))
    avg_words = words / sentences

    return TextAnalysis(
        readability=round(max(60.0, 100 - avg_words * 2)),
        grammar=round(max(70.0, 100 - len(_SHOUTING_RE.findall(text)) * 5)),
        structure=round(max(60.0, 100 - (0 if paragraphs > 1 else 20))),
        clarity=round(max(65.0, 100 - (15 if avg_words > 20 else 0))),
        suggestions=[
            "Break long sentences into shorter ones",
            "Use paragraph breaks to separate ideas",
            "Connect ideas with clear transitions",
            "Support claims with concrete examples",
        ],
        strengths=[
            "Ideas are communicated in a readable order",
            "Length suits the content",
        ],
        weaknesses=[
            "Some sentences run long",
            "Punctuation and grammar need a review pass",
        ],
    )


# ---------------------------------------------------------------------------
# Feedback
# ---------------------------------------------------------------------------


def _numbered(items: list[str]) -> list[str]:
    return [f"{i}. {item}" for i, item in enumerate(items, start=1)]


def render_feedback(
    analysis: CodeAnalysis | TextAnalysis,
    report: OriginalityReport,
    flag_threshold: float = 0.3,
) -> str:
    """Render the Markdown feedback report used when no LLM writes one."""
    content_type = "code" if analysis.kind == "code" else "document"
    overall = analysis.overall

    if overall >= 80:
        assessment = f"Excellent work. Your {content_type} scores well across every metric."
    elif overall >= 60:
        assessment = f"Good work. Your {content_type} is solid, with room to improve in a few areas."
    else:
        assessment = f"Your {content_type} needs significant improvement; the notes below say where to start."

    sections = ["## Overall Assessment", "", assessment, ""]
    sections += ["## Key Strengths", "", *_numbered(analysis.strengths or [f"The {content_type} was completed and submitted"]), ""]
    sections += ["## Areas for Improvement", "", *_numbered(analysis.weaknesses or ["Review the work for consistency and clarity"]), ""]
    sections += ["## Specific Recommendations", "", *_numbered(analysis.suggestions or ["Ask a peer to review the next draft"]), ""]

    sections += ["## Originality Check", ""]
    if report.plagiarism_score > flag_threshold:
        sections.append(f"**High similarity detected ({report.plagiarism_score * 100:.1f}%).** "
                        "Review the matched submissions and cite any sources you used.")
    else:
        sections.append("**No significant similarity detected.**")
    if report.ai_flag:
        sections.append(f"**Possible machine-generated text ({report.ai_score * 100:.1f}%).**")
    sections.append("")

    sections.append(f"**Overall Score: {overall:.1f}/100**")
    return "\n".join(sections)

# Orchestration around the pure scorers: picks a similarity strategy, applies
# flag thresholds, and falls back to local analysis whenever the LLM fails.

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from data_designer_originality.authorship import authorship_score
from data_designer_originality.errors import EmptySubmissionError
from data_designer_originality.quality import (
    CodeAnalysis,
    TextAnalysis,
    code_analysis_from_payload,
    fallback_code_analysis,
    fallback_text_analysis,
    render_feedback,
    text_analysis_from_payload,
)
from data_designer_originality.similarity import (
    EXCERPT_CHARS,
    CorpusEntry,
    CorpusItem,
    SimilarityMatch,
    SimilarityResult,
    coerce_corpus_item,
    local_similarity,
)

if TYPE_CHECKING:
    from data_designer_originality.llm import GeminiClient

logger = logging.getLogger(__name__)

ANALYSIS_CONFIDENCE = 0.85

# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisPolicy:
    """Thresholds the caller applies on top of the raw scores."""

    similarity_threshold: float = 0.3
    llm_similarity_threshold: float = 0.2
    top_k: int = 10
    plagiarism_flag_threshold: float = 0.3
    ai_flag_threshold: float = 0.6
    llm_excerpt_chars: int = 1000


DEFAULT_POLICY = AnalysisPolicy()

# ---------------------------------------------------------------------------
# Similarity strategies
# ---------------------------------------------------------------------------


class SimilarityStrategy(Protocol):
    name: str

    def compare(self, candidate: str, corpus: Sequence[CorpusItem], policy: AnalysisPolicy) -> SimilarityResult: ...


class LocalSimilarityStrategy:
    name = "local"

    def compare(self, candidate: str, corpus: Sequence[CorpusItem], policy: AnalysisPolicy) -> SimilarityResult:
        return local_similarity(candidate, corpus, threshold=policy.similarity_threshold, top_k=policy.top_k)


class LLMSimilarityStrategy:
    """Semantic similarity judged by the LLM, one request per corpus item."""

    name = "llm"

    def __init__(self, llm: GeminiClient) -> None:
        self.llm = llm

    def _score(self, candidate: str, content: str, policy: AnalysisPolicy) -> float:
        try:
            return self.llm.similarity(candidate, content, excerpt_chars=policy.llm_excerpt_chars)
        except Exception as e:
            logger.warning(f"LLM similarity failed, counting pair as 0: {e}")
            return 0.0

    def compare(self, candidate: str, corpus: Sequence[CorpusItem], policy: AnalysisPolicy) -> SimilarityResult:
        max_score = 0.0
        matches: list[SimilarityMatch] = []
        for item in corpus:
            score = self._score(candidate, item.content, policy)
            max_score = max(max_score, score)
            if score > policy.llm_similarity_threshold:
                matches.append(SimilarityMatch(str(item.id), score, item.content[:EXCERPT_CHARS], item.label))
        matches.sort(key=lambda m: m.similarity_score, reverse=True)
        return SimilarityResult(max_score=max_score, matches=matches[: policy.top_k])


def select_similarity_strategy(llm: GeminiClient | None) -> SimilarityStrategy:
    if llm is None:
        return LocalSimilarityStrategy()
    return LLMSimilarityStrategy(llm)


# ---------------------------------------------------------------------------
# Originality
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OriginalityReport:
    plagiarism_score: float
    matches: list[SimilarityMatch]
    ai_score: float
    plagiarism_flag: bool
    ai_flag: bool
    scorer: str

    def to_payload(self, include_matches: bool = True) -> dict[str, object]:
        payload: dict[str, object] = {
            "is_valid": not (self.plagiarism_flag or self.ai_flag),
            "plagiarism_score": round(self.plagiarism_score, 4),
            "ai_score": round(self.ai_score, 4),
            "plagiarism_flag": self.plagiarism_flag,
            "ai_flag": self.ai_flag,
            "scorer": self.scorer,
        }
        if include_matches:
            payload["matches"] = [m.to_payload() for m in self.matches]
        return payload


def check_originality(
    content: str,
    corpus: Iterable[CorpusEntry],
    policy: AnalysisPolicy = DEFAULT_POLICY,
    strategy: SimilarityStrategy | None = None,
) -> OriginalityReport:
    """Compare ``content`` against ``corpus`` and score it for machine authorship."""
    strategy = strategy or LocalSimilarityStrategy()
    items = [coerce_corpus_item(entry) for entry in corpus]
    result = strategy.compare(content, items, policy)
    ai_score = authorship_score(content)
    logger.debug(f"originality via {strategy.name}: plagiarism={result.max_score:.3f} ai={ai_score:.3f} over {len(items)} items")
    return OriginalityReport(
        plagiarism_score=result.max_score,
        matches=result.matches,
        ai_score=ai_score,
        plagiarism_flag=result.max_score > policy.plagiarism_flag_threshold,
        ai_flag=ai_score > policy.ai_flag_threshold,
        scorer=strategy.name,
    )


def score_dataset(
    texts: Sequence[str],
    ids: Sequence[str] | None = None,
    policy: AnalysisPolicy = DEFAULT_POLICY,
    strategy: SimilarityStrategy | None = None,
) -> list[OriginalityReport]:
    """Check every text against all other non-empty texts in the same batch."""
    ids = [str(i) for i in ids] if ids is not None else [str(i) for i in range(len(texts))]
    if len(ids) != len(texts):
        raise ValueError(f"Got {len(ids)} ids for {len(texts)} texts")
    corpus = [CorpusItem(id=i, content=t) for i, t in zip(ids, texts)]

    reports = []
    for position, text in enumerate(texts):
        others = [item for n, item in enumerate(corpus) if n != position and item.content.strip()]
        reports.append(check_originality(text, others, policy=policy, strategy=strategy))
    return reports


# ---------------------------------------------------------------------------
# Full submission analysis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Submission:
    id: str
    content: str
    title: str = ""
    file_type: str = "TEXT"
    language: str = "javascript"


@dataclass(frozen=True)
class AnalysisRecord:
    submission_id: str
    analysis: CodeAnalysis | TextAnalysis
    originality: OriginalityReport
    feedback: str
    overall_score: float
    confidence: float = ANALYSIS_CONFIDENCE
    used_llm: bool = False
    notes: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "submission_id": self.submission_id,
            "analysis": self.analysis.to_payload(),
            "originality": self.originality.to_payload(),
            "feedback": self.feedback,
            "overall_score": round(self.overall_score, 2),
            "confidence": self.confidence,
            "used_llm": self.used_llm,
            "notes": list(self.notes),
        }


def _quality(submission: Submission, llm: GeminiClient | None, notes: list[str]) -> CodeAnalysis | TextAnalysis:
    is_code = submission.file_type.upper() == "CODE"
    if llm is not None:
        try:
            if is_code:
                return code_analysis_from_payload(llm.analyze_code(submission.content, submission.language))
            return text_analysis_from_payload(llm.analyze_text(submission.content))
        except Exception as e:
            logger.warning(f"LLM quality analysis failed for {submission.id!r}, using local analysis: {e}")
            notes.append(f"quality: local fallback ({type(e).__name__})")
    if is_code:
        return fallback_code_analysis(submission.content)
    return fallback_text_analysis(submission.content)


def _feedback(
    submission: Submission,
    analysis: CodeAnalysis | TextAnalysis,
    report: OriginalityReport,
    policy: AnalysisPolicy,
    llm: GeminiClient | None,
    notes: list[str],
) -> str:
    if llm is not None:
        try:
            text = llm.feedback(submission.content, analysis, report)
            if text.strip():
                return text
            notes.append("feedback: local fallback (empty reply)")
        except Exception as e:
            logger.warning(f"LLM feedback failed for {submission.id!r}, rendering local report: {e}")
            notes.append(f"feedback: local fallback ({type(e).__name__})")
    return render_feedback(analysis, report, flag_threshold=policy.plagiarism_flag_threshold)


def analyze_submission(
    submission: Submission,
    corpus: Iterable[CorpusEntry],
    policy: AnalysisPolicy = DEFAULT_POLICY,
    llm: GeminiClient | None = None,
) -> AnalysisRecord:
    """Run quality, originality, and feedback analysis for one submission.

    The submission itself and empty corpus entries are excluded from the
    similarity comparison. Any LLM failure degrades to the local path.
    """
    if not submission.content or not submission.content.strip():
        raise EmptySubmissionError(f"Submission {submission.id!r} has no content")

    label = submission.title or submission.id
    logger.info(f"Analyzing {submission.file_type} submission {label!r} ({'llm' if llm else 'local'})")
    notes: list[str] = []
    analysis = _quality(submission, llm, notes)

    items = [coerce_corpus_item(entry) for entry in corpus]
    others = [item for item in items if item.id != str(submission.id) and item.content.strip()]
    report = check_originality(submission.content, others, policy=policy, strategy=select_similarity_strategy(llm))
    feedback = _feedback(submission, analysis, report, policy, llm, notes)

    logger.info(
        f"Submission {label!r}: overall={analysis.overall:.1f} "
        f"plagiarism={report.plagiarism_score:.3f} ai={report.ai_score:.3f}"
    )
    return AnalysisRecord(
        submission_id=str(submission.id),
        analysis=analysis,
        originality=report,
        feedback=feedback,
        overall_score=analysis.overall,
        used_llm=llm is not None,
        notes=notes,
    )

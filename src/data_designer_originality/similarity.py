# Local plagiarism similarity: word-set Jaccard blended with verbatim
# substring overlap. Pure functions, no I/O.

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Union

from data_designer_originality.errors import InvalidInputError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

JACCARD_WEIGHT = 0.7
OVERLAP_WEIGHT = 0.3
WINDOW_CHARS = 20
EXCERPT_CHARS = 200

DEFAULT_THRESHOLD = 0.3
DEFAULT_TOP_K = 10

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CorpusItem:
    id: str
    content: str
    title: str | None = None

    @property
    def label(self) -> str:
        return self.title or str(self.id)


@dataclass(frozen=True)
class SimilarityMatch:
    source_id: str
    similarity_score: float
    excerpt: str
    source: str

    def to_payload(self) -> dict[str, object]:
        return {
            "source_id": self.source_id,
            "similarity_score": self.similarity_score,
            "excerpt": self.excerpt,
            "source": self.source,
        }


@dataclass(frozen=True)
class SimilarityResult:
    max_score: float
    matches: list[SimilarityMatch]


CorpusEntry = Union[CorpusItem, Mapping[str, object]]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _require_text(value: object, what: str) -> str:
    if not isinstance(value, str):
        raise InvalidInputError(f"{what} must be a string, got {type(value).__name__}")
    return value


def _word_set(text: str) -> set[str]:
    return set(text.lower().split())


def _jaccard(a: str, b: str) -> float:
    words_a = _word_set(a)
    words_b = _word_set(b)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def _substring_overlap(a: str, b: str) -> float:
    # Ordering by (length, text) makes the pair order irrelevant.
    shorter, longer = sorted((a, b), key=lambda t: (len(t), t))
    if not shorter.strip():
        return 0.0
    window = min(WINDOW_CHARS, len(shorter))
    offsets = len(shorter) - window + 1
    longer_windows = {longer[j : j + window] for j in range(len(longer) - window + 1)}
    found = sum(1 for i in range(offsets) if shorter[i : i + window] in longer_windows)
    return found / offsets


def coerce_corpus_item(entry: CorpusEntry) -> CorpusItem:
    if isinstance(entry, CorpusItem):
        _require_text(entry.content, "corpus item content")
        return entry
    if not isinstance(entry, Mapping):
        raise InvalidInputError(f"corpus entries must be CorpusItem or mapping, got {type(entry).__name__}")
    missing = [key for key in ("id", "content") if key not in entry]
    if missing:
        raise InvalidInputError(f"corpus entry is missing {', '.join(missing)}")
    content = _require_text(entry["content"], "corpus item content")
    title = entry.get("title")
    return CorpusItem(id=str(entry["id"]), content=content, title=str(title) if title else None)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def similarity(candidate: str, corpus_item: str) -> float:
    """Blend word-set Jaccard similarity with verbatim substring overlap.

    Texts of 20 characters or fewer collapse to a single window: the overlap is
    1.0 when the shorter text appears verbatim in the longer one, else 0.0.
    Blank texts never overlap, so two empty strings score 0.
    """
    _require_text(candidate, "candidate")
    _require_text(corpus_item, "corpus item")
    score = JACCARD_WEIGHT * _jaccard(candidate, corpus_item) + OVERLAP_WEIGHT * _substring_overlap(candidate, corpus_item)
    return _clamp(score)


def local_similarity(
    candidate: str,
    corpus: Iterable[CorpusEntry],
    threshold: float = DEFAULT_THRESHOLD,
    top_k: int = DEFAULT_TOP_K,
) -> SimilarityResult:
    """Score a candidate against every corpus item.

    Args:
        candidate: Text being checked.
        corpus: ``CorpusItem`` objects or mappings with ``id`` and ``content``
            (and optionally ``title``).
        threshold: Items must score strictly above this to be reported.
        top_k: Maximum number of matches returned.

    Returns:
        ``SimilarityResult`` with the highest score seen across the whole corpus
        and the retained matches, best first.
    """
    _require_text(candidate, "candidate")
    if not 0.0 <= threshold <= 1.0:
        raise InvalidInputError(f"threshold must be within [0, 1], got {threshold}")
    if top_k < 0:
        raise InvalidInputError(f"top_k must be non-negative, got {top_k}")

    items = [coerce_corpus_item(entry) for entry in corpus]
    max_score = 0.0
    matches: list[SimilarityMatch] = []
    for item in items:
        score = similarity(candidate, item.content)
        max_score = max(max_score, score)
        if score > threshold:
            matches.append(SimilarityMatch(str(item.id), score, item.content[:EXCERPT_CHARS], item.label))

    matches.sort(key=lambda m: m.similarity_score, reverse=True)
    return SimilarityResult(max_score=max_score, matches=matches[:top_k])

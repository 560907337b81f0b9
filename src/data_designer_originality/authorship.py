# Machine-authorship heuristic. Regex pattern categories feed a "machine" and a
# "human" accumulator; a few structural signals and adjustments are layered on
# top and the result is clamped to [0, 1]. Higher means more likely generated.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from data_designer_originality.errors import InvalidInputError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuthorshipWeights:
    """Per-category weights, density thresholds, and fixed bonuses."""

    strong_machine_weight: float = 20.0
    moderate_machine_weight: float = 5.0
    human_marker_weight: float = 30.0
    human_discount: float = 0.5

    pronoun_high_density: float = 0.03
    pronoun_high_bonus: float = 0.6
    pronoun_low_density: float = 0.015
    pronoun_low_bonus: float = 0.3
    casual_weight: float = 40.0

    opener_min_sentences: int = 3
    opener_unique_ratio: float = 0.4
    opener_bonus: float = 0.3
    punctuation_ratio: float = 0.8
    punctuation_bonus: float = 0.2
    formal_density: float = 0.05
    formal_bonus: float = 0.3
    code_match_value: float = 0.1
    code_threshold: float = 0.5
    code_bonus: float = 0.4

    repeated_word_penalty: float = 0.2
    connector_density: float = 0.02
    connector_penalty: float = 0.3


DEFAULT_WEIGHTS = AuthorshipWeights()

MACHINE = "machine"
HUMAN = "human"

# ---------------------------------------------------------------------------
# Compiled patterns
# ---------------------------------------------------------------------------


def _words_re(*alternatives: str) -> re.Pattern[str]:
    return re.compile(r"\b(" + "|".join(alternatives) + r")\b", re.IGNORECASE)


_STRONG_MACHINE_PATTERNS = [
    _words_re("it is important to note", "it should be noted", "it is worth mentioning", "it is crucial to"),
    _words_re("in order to", "with the aim of", "for the purpose of", "in an effort to"),
    _words_re("it is evident that", "it is clear that", "it is apparent that"),
    _words_re("plays a crucial role", "is essential", "is vital", "is significant"),
    _words_re("in today's world", "in the modern era", "in recent years", "in the digital age"),
    _words_re("has become increasingly", "has been growing", "has evolved to become"),
    _words_re("offers tremendous", "presents significant", "provides valuable"),
    _words_re("numerous benefits", "various aspects", "comprehensive approach"),
    _words_re("facilitate the process", "optimize performance", "leverage technology"),
]
_MODERATE_MACHINE_PATTERNS = [
    _words_re("however", "furthermore", "moreover", "additionally", "in conclusion", "to summarize", "in summary"),
    _words_re("comprehensive", "thorough", "detailed", "extensive", "systematic"),
    _words_re("utilize", "facilitate", "implement", "enhance", "optimize", "leverage"),
    _words_re("thus", "hence", "therefore", "consequently", "accordingly", "subsequently"),
    _words_re("one of the", "some of the", "many of the", "various"),
]
_HUMAN_MARKER_PATTERNS = [
    _words_re("I", "we", "my", "our", "me", "us", "myself", "we're", "I'm", "I've", "I'll"),
    _words_re("actually", "really", "just", "kinda", "sorta", "definitely", "probably", "maybe"),
    _words_re("damn", "shit", "gosh", "wow", "cool", "nice", "awesome", "sucks"),
    _words_re("I think", "I believe", "I feel", "in my opinion", "I guess"),
    _words_re("idk", "idc", "lol", "omg", "tbh", "imo", "btw"),
    _words_re("probably", "maybe", "might", "could", "should", "would"),
    _words_re("because", "so", "but", "and", "like", "you know"),
    re.compile(r"[a-z]+'[a-z]+", re.IGNORECASE),
]

_PRONOUN_RE = _words_re("I", "we", "my", "our", "me", "us", "myself", "ourselves", "I'm", "I've", "I'll", "we're")
_CASUAL_RE = _words_re("actually", "really", "just", "kinda", "sorta", "maybe", "probably", "definitely", "cool", "nice", "awesome")
_FORMAL_RE = _words_re("analysis", "implementation", "methodology", "framework", "paradigm", "infrastructure", "optimization", "utilization")
_CONNECTOR_RE = _words_re("actually", "really", "like", "you know", "I mean")
_REPEATED_WORD_RE = re.compile(r"\b(\w+)\s+\1\b", re.IGNORECASE)

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_CAPITALISED_BOUNDARY_RE = re.compile(r"[.!?]\s+[A-Z]")

_CODE_HINTS = ("function", "const", "let", "var")
_CODE_PATTERNS = [
    re.compile(r"\b(function\s+\w+\s*\([^)]*\)\s*\{)", re.IGNORECASE),
    re.compile(r"\b(const\s+\w+\s*=\s*\([^)]*\)\s*=>)", re.IGNORECASE),
    re.compile(r"\b(if\s*\([^)]*\)\s*\{)", re.IGNORECASE),
    re.compile(r"\b(for\s*\([^)]*\)\s*\{)", re.IGNORECASE),
    re.compile(r"\b(while\s*\([^)]*\)\s*\{)", re.IGNORECASE),
    re.compile(r"\b(try\s*\{)", re.IGNORECASE),
    re.compile(r"\b(catch\s*\([^)]*\)\s*\{)", re.IGNORECASE),
    re.compile(r"\b(console\.log\()", re.IGNORECASE),
    re.compile(r"\b(return\s+)", re.IGNORECASE),
    re.compile(r"\b(import\s+)", re.IGNORECASE),
    re.compile(r"\b(export\s+)", re.IGNORECASE),
]

# ---------------------------------------------------------------------------
# Pattern category table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternCategory:
    """One row of the scoring table.

    Every match of every pattern contributes ``(matches / word_count) * weight``
    to the ``target`` accumulator, where ``weight`` is read from the
    ``AuthorshipWeights`` field named by ``weight_field``.
    """

    name: str
    patterns: tuple[re.Pattern[str], ...]
    weight_field: str
    target: str

    def weight(self, weights: AuthorshipWeights) -> float:
        return getattr(weights, self.weight_field)

    def contribution(self, text: str, word_count: int, weights: AuthorshipWeights) -> float:
        matched = sum(_count(pattern, text) for pattern in self.patterns)
        return (matched / word_count) * self.weight(weights)


def _count(pattern: re.Pattern[str], text: str) -> int:
    return sum(1 for _ in pattern.finditer(text))


CATEGORIES: tuple[PatternCategory, ...] = (
    PatternCategory("strong_machine", tuple(_STRONG_MACHINE_PATTERNS), "strong_machine_weight", MACHINE),
    PatternCategory("moderate_machine", tuple(_MODERATE_MACHINE_PATTERNS), "moderate_machine_weight", MACHINE),
    PatternCategory("human_markers", tuple(_HUMAN_MARKER_PATTERNS), "human_marker_weight", HUMAN),
    PatternCategory("casual_language", (_CASUAL_RE,), "casual_weight", HUMAN),
)

# ---------------------------------------------------------------------------
# Structural signals and adjustments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _TextContext:
    text: str
    word_count: int
    sentence_parts: list[str]
    hp: AuthorshipWeights


def _pronoun_density(ctx: _TextContext) -> float:
    ratio = _count(_PRONOUN_RE, ctx.text) / ctx.word_count
    if ratio > ctx.hp.pronoun_high_density:
        return ctx.hp.pronoun_high_bonus
    if ratio > ctx.hp.pronoun_low_density:
        return ctx.hp.pronoun_low_bonus
    return 0.0


def _repetitive_openers(ctx: _TextContext) -> float:
    openers = [part.strip().split(" ")[0] for part in ctx.sentence_parts]
    openers = [o for o in openers if o]
    if len(openers) > ctx.hp.opener_min_sentences and len(set(openers)) / len(openers) < ctx.hp.opener_unique_ratio:
        return ctx.hp.opener_bonus
    return 0.0


def _tidy_punctuation(ctx: _TextContext) -> float:
    boundaries = len(ctx.sentence_parts) - 1
    if boundaries <= 0:
        return 0.0
    if _count(_CAPITALISED_BOUNDARY_RE, ctx.text) / boundaries > ctx.hp.punctuation_ratio:
        return ctx.hp.punctuation_bonus
    return 0.0


def _formal_vocabulary(ctx: _TextContext) -> float:
    if _count(_FORMAL_RE, ctx.text) / ctx.word_count > ctx.hp.formal_density:
        return ctx.hp.formal_bonus
    return 0.0


def _code_syntax(ctx: _TextContext) -> float:
    if not any(hint in ctx.text for hint in _CODE_HINTS):
        return 0.0
    code_score = sum(_count(pattern, ctx.text) * ctx.hp.code_match_value for pattern in _CODE_PATTERNS)
    if code_score > ctx.hp.code_threshold:
        return ctx.hp.code_bonus
    return 0.0


def _repeated_word(ctx: _TextContext) -> float:
    if _REPEATED_WORD_RE.search(ctx.text):
        return -ctx.hp.repeated_word_penalty
    return 0.0


def _conversational_connectors(ctx: _TextContext) -> float:
    if _count(_CONNECTOR_RE, ctx.text) > ctx.word_count * ctx.hp.connector_density:
        return -ctx.hp.connector_penalty
    return 0.0


_Signal = Callable[[_TextContext], float]

# (name, signal, target); "adjustment" values are added after the human discount.
_SIGNALS: list[tuple[str, _Signal, str]] = [
    ("pronoun_density", _pronoun_density, HUMAN),
    ("repetitive_openers", _repetitive_openers, MACHINE),
    ("tidy_punctuation", _tidy_punctuation, MACHINE),
    ("formal_vocabulary", _formal_vocabulary, MACHINE),
    ("code_syntax", _code_syntax, MACHINE),
    ("repeated_word", _repeated_word, "adjustment"),
    ("conversational_connectors", _conversational_connectors, "adjustment"),
]

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuthorshipBreakdown:
    score: float
    word_count: int
    machine: float = 0.0
    human: float = 0.0
    adjustment: float = 0.0
    contributions: dict[str, float] = field(default_factory=dict)
    signals: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "score": self.score,
            "word_count": self.word_count,
            "machine": round(self.machine, 4),
            "human": round(self.human, 4),
            "adjustment": round(self.adjustment, 4),
            "contributions": {k: round(v, 4) for k, v in self.contributions.items()},
            "signals": list(self.signals),
        }


def analyze_authorship(text: str, weights: AuthorshipWeights | None = None) -> AuthorshipBreakdown:
    """Score text for machine authorship and report how the score was reached.

    Args:
        text: The text to analyze.
        weights: Optional overrides for the category weights and thresholds.

    Returns:
        ``AuthorshipBreakdown`` whose ``score`` is in [0, 1]; 0 for text with no words.
    """
    if not isinstance(text, str):
        raise InvalidInputError(f"text must be a string, got {type(text).__name__}")
    hp = weights or DEFAULT_WEIGHTS
    word_count = len(text.split())
    if word_count == 0:
        return AuthorshipBreakdown(score=0.0, word_count=0)

    totals = {MACHINE: 0.0, HUMAN: 0.0, "adjustment": 0.0}
    contributions: dict[str, float] = {}
    for category in CATEGORIES:
        value = category.contribution(text, word_count, hp)
        contributions[category.name] = value
        totals[category.target] += value

    ctx = _TextContext(text=text, word_count=word_count, sentence_parts=_SENTENCE_SPLIT_RE.split(text), hp=hp)
    fired: list[str] = []
    for name, signal, target in _SIGNALS:
        value = signal(ctx)
        if value:
            fired.append(name)
            contributions[name] = value
            totals[target] += value

    raw = totals[MACHINE] - hp.human_discount * totals[HUMAN] + totals["adjustment"]
    score = max(0.0, min(1.0, raw))
    logger.debug(f"authorship: machine={totals[MACHINE]:.3f} human={totals[HUMAN]:.3f} score={score:.3f}")
    return AuthorshipBreakdown(
        score=score,
        word_count=word_count,
        machine=totals[MACHINE],
        human=totals[HUMAN],
        adjustment=totals["adjustment"],
        contributions=contributions,
        signals=fired,
    )


def authorship_score(text: str, weights: AuthorshipWeights | None = None) -> float:
    """Return the likelihood in [0, 1] that ``text`` was machine-generated."""
    return analyze_authorship(text, weights).score

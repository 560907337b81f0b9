import pytest

from data_designer_originality.authorship import (
    CATEGORIES,
    AuthorshipWeights,
    analyze_authorship,
    authorship_score,
)
from data_designer_originality.errors import InvalidInputError

HUMAN_TEXT = "I think I'm really happy with how this turned out, honestly"

FORMAL_TEXT = (
    "Furthermore, it is important to note that the implementation utilizes a comprehensive framework"
)

GENERATED_ESSAY = (
    "In today's world, technology plays a crucial role in education. It is important to note that "
    "digital tools offer numerous benefits. Furthermore, the implementation of a comprehensive approach "
    "is essential in order to optimize performance. Moreover, it is evident that the framework provides "
    "valuable support. Additionally, various aspects of the methodology have become increasingly relevant."
)

CASUAL_POST = (
    "ok so I just tried the new ramen place and honestly it was kinda awesome. my friend said it "
    "sucks but idk, I think he's wrong lol. we're def going back next week because the broth was "
    "really good and the guy at the counter was super nice."
)

JS_SNIPPET = (
    "function add(a, b) { return a + b; }\n"
    "const f = (x) => x;\n"
    "if (x) { y(); }\n"
    "for (i) { }\n"
    "console.log(x);\n"
    "import fs"
)


class TestAuthorshipScore:
    def test_empty_text_scores_zero(self):
        assert authorship_score("") == 0.0
        assert authorship_score("   \n\t ") == 0.0

    def test_human_text_scores_below_formal_text(self):
        human = authorship_score(HUMAN_TEXT)
        formal = authorship_score(FORMAL_TEXT)
        assert human < formal
        assert human == 0.0
        assert formal > 0.6

    def test_generated_essay_scores_above_casual_post(self):
        assert authorship_score(GENERATED_ESSAY) > 0.6
        assert authorship_score(CASUAL_POST) < 0.2

    def test_scores_are_bounded(self):
        samples = [
            HUMAN_TEXT, FORMAL_TEXT, GENERATED_ESSAY, CASUAL_POST, JS_SNIPPET,
            "a", "?!.", "日本語のテキストです。", "café naïve ümlaut", "however " * 200,
        ]
        for text in samples:
            assert 0.0 <= authorship_score(text) <= 1.0

    def test_deterministic(self):
        assert analyze_authorship(GENERATED_ESSAY) == analyze_authorship(GENERATED_ESSAY)

    def test_rejects_non_strings(self):
        with pytest.raises(InvalidInputError):
            authorship_score(None)
        with pytest.raises(InvalidInputError):
            authorship_score(b"bytes")


class TestPatternCategories:
    def test_table_targets(self):
        targets = {c.name: c.target for c in CATEGORIES}
        assert targets == {
            "strong_machine": "machine",
            "moderate_machine": "machine",
            "human_markers": "human",
            "casual_language": "human",
        }

    def test_weights_are_read_from_hyperparameters(self):
        custom = AuthorshipWeights(strong_machine_weight=7.0, human_marker_weight=11.0)
        weights = {c.name: c.weight(custom) for c in CATEGORIES}
        assert weights["strong_machine"] == 7.0
        assert weights["human_markers"] == 11.0
        assert weights["moderate_machine"] == 5.0
        assert weights["casual_language"] == 40.0

    def test_strong_phrase_contribution(self):
        result = analyze_authorship("It is important to note this.")
        assert result.word_count == 6
        assert result.contributions["strong_machine"] == pytest.approx(20 / 6)

    def test_zeroed_weights_lower_the_score(self):
        muted = AuthorshipWeights(strong_machine_weight=0.0, moderate_machine_weight=0.0, formal_bonus=0.0)
        assert authorship_score(FORMAL_TEXT, muted) < authorship_score(FORMAL_TEXT)


class TestStructuralSignals:
    def test_high_pronoun_density(self):
        result = analyze_authorship("I went home and I slept.")
        assert result.contributions["pronoun_density"] == 0.6

    def test_low_pronoun_density(self):
        text = "I " + " ".join(f"word{i}" for i in range(39))
        result = analyze_authorship(text)
        assert result.contributions["pronoun_density"] == 0.3

    def test_repetitive_openers(self):
        text = "The cat sat. The dog ran. The bird flew. The fish swam. The cow slept."
        assert "repetitive_openers" in analyze_authorship(text).signals

    def test_varied_openers(self):
        text = "The cat sat. A dog ran. Birds flew. Fish swam. Cows slept."
        assert "repetitive_openers" not in analyze_authorship(text).signals

    def test_tidy_punctuation(self):
        assert "tidy_punctuation" in analyze_authorship("Alpha one. Beta two. Gamma three").signals
        assert "tidy_punctuation" not in analyze_authorship("alpha one. beta two. gamma three").signals

    def test_formal_vocabulary(self):
        assert "formal_vocabulary" in analyze_authorship("The framework analysis methodology").signals

    def test_code_syntax(self):
        result = analyze_authorship(JS_SNIPPET)
        assert "code_syntax" in result.signals
        assert result.contributions["code_syntax"] == 0.4

    def test_code_patterns_need_a_keyword_hint(self):
        assert "code_syntax" not in analyze_authorship("if (x) { y(); } return z").signals

    def test_repeated_word_is_a_human_signal(self):
        result = analyze_authorship("The report was the the final version.")
        assert "repeated_word" in result.signals
        assert result.adjustment == pytest.approx(-0.2)

    def test_conversational_connectors(self):
        result = analyze_authorship("It was like really like that.")
        assert "conversational_connectors" in result.signals
        assert result.adjustment == pytest.approx(-0.3)

    def test_breakdown_payload(self):
        payload = analyze_authorship(GENERATED_ESSAY).to_payload()
        assert set(payload) == {"score", "word_count", "machine", "human", "adjustment", "contributions", "signals"}
        assert payload["score"] == authorship_score(GENERATED_ESSAY)

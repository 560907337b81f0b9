import pandas as pd
import pytest
from pydantic import ValidationError

from data_designer_originality.config import OriginalityColumnConfig
from data_designer_originality.generator import policy_from_config, row_texts, score_frame
from data_designer_originality.orchestrator import LocalSimilarityStrategy


class TestOriginalityColumnConfig:
    def test_defaults(self):
        config = OriginalityColumnConfig(name="originality", target_columns=["essay"])
        assert config.column_type == "originality-check"
        assert config.similarity_threshold == 0.3
        assert config.top_k == 10
        assert config.plagiarism_flag_threshold == 0.3
        assert config.ai_flag_threshold == 0.6
        assert config.use_llm is False
        assert config.required_columns == ["essay"]
        assert config.side_effect_columns == []

    def test_id_column_is_required(self):
        config = OriginalityColumnConfig(name="originality", target_columns=["essay"], id_column="student")
        assert config.required_columns == ["essay", "student"]

    def test_threshold_bounds(self):
        with pytest.raises(ValidationError):
            OriginalityColumnConfig(name="originality", target_columns=["essay"], ai_flag_threshold=1.5)
        with pytest.raises(ValidationError):
            OriginalityColumnConfig(name="originality", target_columns=["essay"], top_k=-1)

    def test_policy_from_config(self):
        config = OriginalityColumnConfig(name="o", target_columns=["essay"], top_k=3, ai_flag_threshold=0.8)
        policy = policy_from_config(config)
        assert policy.top_k == 3
        assert policy.ai_flag_threshold == 0.8
        assert policy.similarity_threshold == 0.3


class TestRowTexts:
    def test_joins_target_columns(self):
        df = pd.DataFrame({"title": ["Bridges", "Gardens"], "body": ["Steel rusts.", "Soil matters."]})
        assert row_texts(df, ["title", "body"]) == ["Bridges Steel rusts.", "Gardens Soil matters."]


ESSAY = (
    "The bridge collapsed at 3:47 a.m. on a Tuesday. River water pushed through the gap in under a "
    "minute. Two cars stopped short of the edge."
)
OTHER = "Our garden club met on Sunday to swap tomato seedlings and argue about compost."


class TestScoreFrame:
    def test_flags_copied_rows(self):
        df = pd.DataFrame({"student": ["ann", "bo", "cy"], "essay": [ESSAY, OTHER, ESSAY]})
        config = OriginalityColumnConfig(name="originality", target_columns=["essay"], id_column="student")
        results = score_frame(df, config, LocalSimilarityStrategy())
        assert [r["plagiarism_flag"] for r in results] == [True, False, True]
        assert [r["is_valid"] for r in results] == [False, True, False]
        assert results[0]["matches"][0]["source_id"] == "cy"
        assert results[2]["matches"][0]["source_id"] == "ann"

    def test_index_labels_and_no_matches(self):
        df = pd.DataFrame({"essay": [ESSAY, ESSAY]}, index=[10, 20])
        config = OriginalityColumnConfig(name="originality", target_columns=["essay"], include_matches=False)
        results = score_frame(df, config, LocalSimilarityStrategy())
        assert all("matches" not in r for r in results)
        assert all(r["scorer"] == "local" for r in results)
        assert results[0]["plagiarism_score"] == 1.0

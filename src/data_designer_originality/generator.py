from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from data_designer.engine.column_generators.generators.base import ColumnGeneratorFullColumn

from data_designer_originality.config import OriginalityColumnConfig
from data_designer_originality.llm import client_from_env
from data_designer_originality.orchestrator import (
    AnalysisPolicy,
    SimilarityStrategy,
    score_dataset,
    select_similarity_strategy,
)

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)


def policy_from_config(config: OriginalityColumnConfig) -> AnalysisPolicy:
    return AnalysisPolicy(
        similarity_threshold=config.similarity_threshold,
        top_k=config.top_k,
        plagiarism_flag_threshold=config.plagiarism_flag_threshold,
        ai_flag_threshold=config.ai_flag_threshold,
    )


def row_texts(data: pd.DataFrame, target_columns: list[str]) -> list[str]:
    texts = []
    for _, row in data[target_columns].iterrows():
        texts.append(" ".join(str(v) for v in row.values if v is not None))
    return texts


def score_frame(data: pd.DataFrame, config: OriginalityColumnConfig, strategy: SimilarityStrategy) -> list[dict]:
    """Score every row of ``data`` against the other rows and return one payload per row."""
    texts = row_texts(data, config.target_columns)
    ids = data[config.id_column].astype(str).tolist() if config.id_column else [str(i) for i in data.index]
    reports = score_dataset(texts, ids, policy=policy_from_config(config), strategy=strategy)

    flagged = sum(1 for r in reports if r.plagiarism_flag or r.ai_flag)
    logger.info(f"   flagged {flagged} of {len(reports)} rows")
    return [r.to_payload(include_matches=config.include_matches) for r in reports]


class OriginalityColumnGenerator(ColumnGeneratorFullColumn[OriginalityColumnConfig]):
    """Column generator that scores each row for plagiarism against the other rows and for machine authorship."""

    def generate(self, data: pd.DataFrame) -> pd.DataFrame:
        logger.info(f"\U0001f50d Checking column {self.config.name!r} for originality")
        logger.info(f"   target columns: {self.config.target_columns}")
        logger.info(f"   flag thresholds: plagiarism>{self.config.plagiarism_flag_threshold} ai>{self.config.ai_flag_threshold}")

        llm = client_from_env(self.config.llm_model) if self.config.use_llm else None
        strategy = select_similarity_strategy(llm)
        logger.info(f"   similarity scorer: {strategy.name}")

        results = score_frame(data, self.config, strategy)

        data = data.copy()
        data[self.config.name] = results
        return data

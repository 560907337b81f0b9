# SPDX-License-Identifier: Apache-2.0
"""Originality check plugin for NeMo Data Designer.

Adds an ``originality-check`` column type that scores each row's text for
plagiarism against the other rows (word-set Jaccard plus verbatim substring
overlap) and for machine authorship (weighted regex pattern categories).
Works offline; Gemini can optionally judge semantic similarity.

Usage::

    from data_designer_originality import OriginalityColumnConfig

    builder.add_column(OriginalityColumnConfig(
        name="originality",
        target_columns=["essay"],
        ai_flag_threshold=0.6,
    ))

The scorers are also usable on their own::

    from data_designer_originality import authorship_score, local_similarity
"""

from data_designer_originality.authorship import AuthorshipWeights, analyze_authorship, authorship_score
from data_designer_originality.config import OriginalityColumnConfig
from data_designer_originality.errors import InvalidInputError
from data_designer_originality.orchestrator import AnalysisPolicy, analyze_submission, check_originality
from data_designer_originality.similarity import CorpusItem, local_similarity, similarity

__all__ = [
    "OriginalityColumnConfig",
    "authorship_score",
    "analyze_authorship",
    "AuthorshipWeights",
    "local_similarity",
    "similarity",
    "CorpusItem",
    "check_originality",
    "analyze_submission",
    "AnalysisPolicy",
    "InvalidInputError",
]

from __future__ import annotations

from typing import Literal

from pydantic import Field

from data_designer.config.column_configs import SingleColumnConfig


class OriginalityColumnConfig(SingleColumnConfig):
    """Score text columns for plagiarism against the rest of the dataset and for machine authorship.

    Each row's text is compared with every other row's text (word-set Jaccard blended with
    verbatim substring overlap) and run through a regex-based authorship heuristic. The
    output is a dict per row with both scores, the raised flags, and the closest matches.

    Attributes:
        target_columns: Columns whose text content will be concatenated and scored.
        id_column: Column used to label matches. Defaults to the row index.
        similarity_threshold: Rows scoring strictly above this are reported as matches.
        top_k: Maximum number of matches reported per row.
        plagiarism_flag_threshold: Best similarity above this raises ``plagiarism_flag``.
        ai_flag_threshold: Authorship score above this raises ``ai_flag``.
        include_matches: Include the matched rows (id, score, excerpt) in output.
        use_llm: Ask Gemini for semantic similarity when ``GEMINI_API_KEY`` is set.
        llm_model: Gemini model used when ``use_llm`` is enabled.
    """

    target_columns: list[str]
    id_column: str | None = Field(default=None, description="Column used to label matched rows")
    similarity_threshold: float = Field(default=0.3, ge=0.0, le=1.0, description="Minimum similarity for a reported match")
    top_k: int = Field(default=10, ge=0, description="Maximum matches reported per row")
    plagiarism_flag_threshold: float = Field(default=0.3, ge=0.0, le=1.0, description="Similarity above which a row is flagged")
    ai_flag_threshold: float = Field(default=0.6, ge=0.0, le=1.0, description="Authorship score above which a row is flagged")
    include_matches: bool = Field(default=True, description="Include matched rows in output")
    use_llm: bool = Field(default=False, description="Use Gemini for semantic similarity when configured")
    llm_model: str = Field(default="gemini-2.5-flash", description="Gemini model name")
    column_type: Literal["originality-check"] = "originality-check"

    @staticmethod
    def get_column_emoji() -> str:
        return "\U0001f50d"

    @property
    def required_columns(self) -> list[str]:
        if self.id_column:
            return [*self.target_columns, self.id_column]
        return self.target_columns

    @property
    def side_effect_columns(self) -> list[str]:
        return []

"""Pydantic models for the remote model's reply.

Field aliases match the camelCase wire format of the response schema, so a
parsed reply can be passed straight to ``OptimizationResult.model_validate``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

# Values the model uses in grammarIssues to say "nothing found"
NO_ISSUE_SENTINELS = frozenset({"", "none", "no issues", "n/a", "-"})


class OriginalAnalysis(BaseModel):
    grammar_issues: list[str] = Field(alias="grammarIssues")
    clarity_score: float = Field(alias="clarityScore", ge=0, le=100)
    intent_detected: str = Field(alias="intentDetected")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def issues(self) -> list[str]:
        """Grammar issues with the "nothing found" sentinels dropped."""
        return [
            issue for issue in self.grammar_issues
            if issue.strip().lower() not in NO_ISSUE_SENTINELS
        ]


class OptimizedVariant(BaseModel):
    title: str
    content: str
    reasoning: str
    tags: list[str] = []

    model_config = {"frozen": True}

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, tags: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in tags:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class OptimizationResult(BaseModel):
    original_analysis: OriginalAnalysis = Field(alias="originalAnalysis")
    variants: list[OptimizedVariant]

    model_config = {"populate_by_name": True, "frozen": True}

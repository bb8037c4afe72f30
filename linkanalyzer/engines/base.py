"""
Type contracts shared by all analysis engines.

Design principles:
- Engines are stateless: all state comes from their arguments
- Results are immutable once produced (frozen models)
- Field names match the JSON documents served by the API and written by export
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field

Scalar = Union[bool, int, float, str, None]


# ─────────────────────────────────────────────
# Analysis sections
# ─────────────────────────────────────────────

class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Headings(FrozenModel):
    h1: list[str] = Field(default_factory=list)
    h2: list[str] = Field(default_factory=list)
    h3: list[str] = Field(default_factory=list)


class LinkCounts(FrozenModel):
    """
    total counts every raw href before classification, duplicates and
    non-navigational ones included, so internal + external <= total.
    """
    internal: int = 0
    external: int = 0
    total: int = 0


class SocialMeta(FrozenModel):
    open_graph: dict[str, str] = Field(default_factory=dict, alias="openGraph")
    twitter: dict[str, str] = Field(default_factory=dict)
    other: dict[str, str] = Field(default_factory=dict)


class SeoAnalysis(FrozenModel):
    score: int = Field(ge=0, le=100, default=0)
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    details: dict[str, Scalar] = Field(default_factory=dict)


class PerformanceMetrics(FrozenModel):
    response_time_ms: int = 0
    content_size_bytes: int = 0
    status_code: int = 0
    redirect_count: int = 0


# ─────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────

class AnalysisResult(FrozenModel):
    """Everything learned about a single page."""
    url: str
    title: str = "No title found"
    description: str = ""
    headings: Headings = Field(default_factory=Headings)
    link_counts: LinkCounts = Field(default_factory=LinkCounts)
    images: list[str] = Field(default_factory=list)
    word_count: int = 0
    social_meta: SocialMeta = Field(default_factory=SocialMeta)
    seo_analysis: SeoAnalysis = Field(default_factory=SeoAnalysis)
    performance_metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class BulkItem(FrozenModel):
    index: int
    url: str
    data: AnalysisResult


class BulkError(FrozenModel):
    index: int
    url: str
    error: str


class BulkSummary(FrozenModel):
    total: int = 0
    successful: int = 0
    failed: int = 0


class BulkResult(FrozenModel):
    """
    Outcome of a bulk analysis. Every input position appears exactly once,
    in either results or errors, and both lists are sorted by index.
    """
    results: list[BulkItem] = Field(default_factory=list)
    errors: list[BulkError] = Field(default_factory=list)
    summary: BulkSummary = Field(default_factory=BulkSummary)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

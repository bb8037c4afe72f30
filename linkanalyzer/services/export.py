"""
Export of analysis results as downloadable JSON documents.
"""

from __future__ import annotations

import json
import re
from datetime import date
from typing import Any, Mapping, Union

from linkanalyzer.engines.base import AnalysisResult

ExportInput = Union[AnalysisResult, Mapping[str, Any]]

EXPORT_FIELDS = (
    "url",
    "title",
    "description",
    "created_at",
    "social_meta",
    "seo_analysis",
    "performance_metrics",
    "headings",
    "link_counts",
    "images",
    "word_count",
)

SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
UNSAFE_FILENAME_CHARS_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def to_export_dict(result: ExportInput) -> dict[str, Any]:
    """Project a result onto the canonical export keys, in canonical order."""
    data = result.to_json_dict() if isinstance(result, AnalysisResult) else dict(result)
    return {key: data[key] for key in EXPORT_FIELDS if key in data}


def export_json(data: ExportInput | list[ExportInput]) -> str:
    if isinstance(data, (list, tuple)):
        payload: Any = [to_export_dict(item) for item in data]
    else:
        payload = to_export_dict(data)
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_filename(url: str, day: date | None = None) -> str:
    day = day or date.today()
    slug = UNSAFE_FILENAME_CHARS_RE.sub("_", SCHEME_RE.sub("", url))
    return f"analysis-{slug}-{day.isoformat()}.json"


def export_summary(result: ExportInput) -> str:
    data = to_export_dict(result)
    link_counts = data.get("link_counts") or {}
    seo = data.get("seo_analysis") or {}
    lines = [
        f"URL: {data.get('url', '')}",
        f"Title: {data.get('title') or 'N/A'}",
        f"Word Count: {data.get('word_count') or 0}",
        f"Total Links: {link_counts.get('total') or 0}",
        f"Images: {len(data.get('images') or [])}",
        f"SEO Score: {seo.get('score') or 0}/100",
    ]
    return "\n".join(lines)

# GDC Analytics SDK
# File: report.py
# Version: v1

"""Report definition builder for the grid executor."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .models import ATTRIBUTE, METRIC, METRIC_GROUP, Element


def get_report_definition(elements: Iterable[Element]) -> Dict[str, Any]:
    """Build a ``reportDefinition`` payload with every element in columns.

    Attributes become grid columns in input order, metrics go to
    ``grid.metrics``, and a trailing ``"metricGroup"`` column is added when
    at least one metric is present. A fresh structure is built on every call.
    """
    elements = list(elements)
    metrics = [e for e in elements if e.type == METRIC]
    attributes = [e for e in elements if e.type == ATTRIBUTE]

    columns: List[Any] = [
        {"attribute": {"alias": "", "totals": [[], []], "uri": a.uri}}
        for a in attributes
    ]
    if metrics:
        columns.append(METRIC_GROUP)

    return {
        "reportDefinition": {
            "content": {
                "filters": [],
                "format": "grid",
                "grid": {
                    "rows": [],
                    "columns": columns,
                    "sort": {"columns": [], "rows": []},
                    "columnWidths": [],
                    "metrics": [{"uri": m.uri, "alias": ""} for m in metrics],
                },
            },
            "meta": {
                "title": "Test",
                "summary": "",
                "tags": "",
                "deprecated": 0,
                "category": "reportDefinition",
            },
        }
    }

# GDC Analytics SDK
# File: execution.py
# Version: v1

"""Tabular report execution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from .http import HttpClient, unwrap
from .models import AttributeHeader, ExecutedReport, HeaderDescriptor, MetricHeader

logger = logging.getLogger(__name__)


def parse_header(column: Dict[str, Any]) -> HeaderDescriptor:
    """Turn one ``executionResult.columns`` entry into a header."""
    display_form = column.get("attributeDisplayForm")
    if display_form:
        meta = unwrap(display_form, "meta")
        return AttributeHeader(
            id=meta.get("identifier"),
            uri=unwrap(meta, "uri"),
            title=meta.get("title", ""),
        )

    metric = unwrap(column, "metric")
    meta = unwrap(metric, "meta")
    return MetricHeader(
        id=meta.get("identifier"),
        title=meta.get("title", ""),
        format=(metric.get("content") or {}).get("format"),
    )


@dataclass
class ExecutionClient:
    http: HttpClient

    async def get_data(self, project_id: str, elements: Iterable[Any]) -> ExecutedReport:
        """Execute a report with ``elements`` as columns and fetch its values.

        ``elements`` are the column references the executor accepts
        (attribute display form or metric identifiers/URIs). Submission
        returns the headers and a link to the tabular result, which is
        fetched (polling while it is being computed). The returned report is
        only populated once both steps succeeded.
        """
        executed_report = ExecutedReport()
        request = {"execution": {"columns": list(elements)}}

        result = await self.http.post(
            f"/gdc/internal/projects/{project_id}/experimental/executions", request
        )
        execution_result = unwrap(result, "executionResult")
        headers: List[HeaderDescriptor] = [
            parse_header(col) for col in unwrap(execution_result, "columns")
        ]

        tabular_uri = unwrap(execution_result, "tabularDataResult")
        logger.debug("Fetching tabular data from %s", tabular_uri)
        tabular = await self.http.get(tabular_uri)

        values = unwrap(tabular, "tabularDataResult", "values")

        executed_report.headers = headers
        executed_report.raw_data = values
        executed_report.is_loaded = True
        return executed_report

# GDC Analytics SDK
# File: tests/test_execution.py
# Version: v1

from __future__ import annotations

import httpx
import pytest

from gdc_sdk import GdcClient, GdcConfig, TransportError, UnexpectedResponseError
from gdc_sdk.execution import parse_header
from gdc_sdk.mock import PROJECT_ID, MockGdcBackend, obj_uri
from gdc_sdk.models import AttributeHeader, ExecutedReport, MetricHeader

EXECUTIONS_PATH = f"/gdc/internal/projects/{PROJECT_ID}/experimental/executions"


def _client(backend: MockGdcBackend) -> GdcClient:
    return GdcClient(config=GdcConfig(poll_interval_ms=0), transport=backend.transport())


def test_new_report_is_not_loaded():
    report = ExecutedReport()
    assert report.is_loaded is False
    assert report.headers == []
    assert report.raw_data == []


def test_parse_header_variants():
    backend = MockGdcBackend()

    attribute = parse_header(backend.objects[obj_uri(101)])
    metric = parse_header(backend.objects[obj_uri(200)])

    assert attribute == AttributeHeader(id="label.region", uri=obj_uri(101), title="Region Name")
    assert attribute.type == "attrLabel"
    assert metric == MetricHeader(id="metric.revenue", title="Revenue", format="$#,##0.00")
    assert metric.type == "metric"


@pytest.mark.asyncio
async def test_get_data_populates_headers_and_values():
    backend = MockGdcBackend(logged_in=True, pending_polls=2)
    columns = ["label.region", "metric.revenue", "metric.orders"]

    async with _client(backend) as client:
        report = await client.get_data(PROJECT_ID, columns)

    assert report.is_loaded is True
    assert len(report.headers) == len(columns)
    assert isinstance(report.headers[0], AttributeHeader)
    assert [h.title for h in report.headers] == ["Region Name", "Revenue", "Orders"]
    assert report.raw_data[0] == ["Region Name 1", "100", "100"]
    assert len(report.raw_data) == 3

    assert backend.last_body[("POST", EXECUTIONS_PATH)] == {"execution": {"columns": columns}}
    # two 202 answers, then the data
    assert backend.count("GET", f"{EXECUTIONS_PATH}/1") == 3


@pytest.mark.asyncio
async def test_submission_failure_raises():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        with pytest.raises(TransportError) as excinfo:
            await client.get_data(PROJECT_ID, ["label.region", "no.such.column"])

    assert excinfo.value.status_code == 400
    assert backend.count("GET") == 0


@pytest.mark.asyncio
async def test_tabular_failure_leaves_report_unloaded(monkeypatch):
    import gdc_sdk.execution as execution_module

    created = []

    def _tracked_report():
        report = ExecutedReport()
        created.append(report)
        return report

    monkeypatch.setattr(execution_module, "ExecutedReport", _tracked_report)

    backend = MockGdcBackend(logged_in=True)
    backend.fail("GET", f"{EXECUTIONS_PATH}/1", 500)

    async with _client(backend) as client:
        with pytest.raises(TransportError):
            await client.get_data(PROJECT_ID, ["metric.revenue"])

    assert len(created) == 1
    assert created[0].is_loaded is False
    assert created[0].headers == []
    assert created[0].raw_data == []


@pytest.mark.asyncio
async def test_submission_without_execution_result_raises_sdk_error(monkeypatch):
    import gdc_sdk.execution as execution_module

    created = []

    def _tracked_report():
        report = ExecutedReport()
        created.append(report)
        return report

    monkeypatch.setattr(execution_module, "ExecutedReport", _tracked_report)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"error": {"message": "bad execution"}})

    client = GdcClient(config=GdcConfig(poll_interval_ms=0), transport=httpx.MockTransport(handler))
    async with client:
        with pytest.raises(UnexpectedResponseError):
            await client.get_data("p1", ["metric.revenue"])

    assert created[0].is_loaded is False


def test_parse_header_without_meta_raises_sdk_error():
    with pytest.raises(UnexpectedResponseError):
        parse_header({"metric": {"content": {}}})

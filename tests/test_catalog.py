# GDC Analytics SDK
# File: tests/test_catalog.py
# Version: v1

"""Listings, palette handling and other single-request helpers."""

from __future__ import annotations

import httpx
import pytest

from gdc_sdk import (
    DEFAULT_PALETTE,
    GdcClient,
    GdcConfig,
    InvalidArgumentError,
    TransportError,
    UnexpectedResponseError,
)
from gdc_sdk.mock import PROFILE_ID, PROJECT_ID, MockGdcBackend
from gdc_sdk.models import Color


def _client(backend: MockGdcBackend) -> GdcClient:
    return GdcClient(config=GdcConfig(poll_interval_ms=0), transport=backend.transport())


def _static_client(status: int, **response) -> GdcClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, **response)

    return GdcClient(config=GdcConfig(poll_interval_ms=0), transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_projects_are_unwrapped():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        projects = await client.get_projects(PROFILE_ID)

    assert len(projects) == 1
    assert projects[0]["meta"]["title"] == "Mock Project"


@pytest.mark.asyncio
async def test_query_listings_return_entries():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        datasets = await client.get_datasets(PROJECT_ID)
        attributes = await client.get_attributes(PROJECT_ID)
        dimensions = await client.get_dimensions(PROJECT_ID)
        metrics = await client.get_metrics(PROJECT_ID)

    assert [d.title for d in datasets] == ["Sales Data", "Employees"]
    assert len(attributes) == 5
    assert {d.title for d in dimensions} == {"Geography", "Catalog"}
    assert metrics[0].identifier == "metric.revenue"
    assert metrics[0].link == f"/gdc/md/{PROJECT_ID}/obj/200"


@pytest.mark.asyncio
async def test_folders_by_type():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        metric_folders = await client.get_folders(PROJECT_ID, "metric")
        fact_folders = await client.get_folders(PROJECT_ID, "fact")
        attribute_folders = await client.get_folders(PROJECT_ID, "attribute")

    assert [f.title for f in metric_folders] == ["Sales", "Finance"]
    assert [f.title for f in fact_folders] == ["Facts"]
    assert {f.title for f in attribute_folders} == {"Geography", "Catalog"}
    assert backend.count("GET", f"/gdc/md/{PROJECT_ID}/query/dimensions") == 1


@pytest.mark.asyncio
async def test_folders_without_type_merge_three_listings():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        folders = await client.get_folders(PROJECT_ID)

    assert set(folders) == {"fact", "metric", "attribute"}
    assert [f.title for f in folders["fact"]] == ["Facts"]
    assert [f.title for f in folders["metric"]] == ["Sales", "Finance"]
    assert len(folders["attribute"]) == 2


@pytest.mark.asyncio
async def test_folders_with_unknown_type_is_rejected_without_requests():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        with pytest.raises(InvalidArgumentError):
            await client.get_folders(PROJECT_ID, "dataset")

    assert backend.calls == []


@pytest.mark.asyncio
async def test_available_metrics_and_attributes_post_bare_lists():
    backend = MockGdcBackend(logged_in=True)
    attr_uris = [f"/gdc/md/{PROJECT_ID}/obj/100"]
    metric_uris = [f"/gdc/md/{PROJECT_ID}/obj/200"]

    async with _client(backend) as client:
        metrics = await client.get_available_metrics(PROJECT_ID, attr_uris)
        attributes = await client.get_available_attributes(PROJECT_ID, metric_uris)

    assert len(metrics) == 5
    assert len(attributes) == 5
    assert backend.last_body[("POST", f"/gdc/md/{PROJECT_ID}/availablemetrics")] == attr_uris
    assert backend.last_body[("POST", f"/gdc/md/{PROJECT_ID}/drillcrosspaths")] == metric_uris


@pytest.mark.asyncio
async def test_current_project_id_from_bootstrap():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        assert await client.get_current_project_id() == PROJECT_ID


# ---------------------------------------------------------------------------
# Color palette
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_custom_palette_is_mapped():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        palette = await client.get_color_palette(PROJECT_ID)

    assert palette == [Color(0x11, 0x22, 0x33), Color(0xAA, 0xBB, 0xCC)]


@pytest.mark.asyncio
async def test_palette_falls_back_to_default_on_status_200_failure():
    backend = MockGdcBackend(logged_in=True)
    backend.palette = None

    async with _client(backend) as client:
        palette = await client.get_color_palette(PROJECT_ID)

    assert palette == list(DEFAULT_PALETTE)
    assert len(palette) == 18


@pytest.mark.asyncio
async def test_palette_rejects_on_other_statuses():
    backend = MockGdcBackend(logged_in=True)
    backend.fail("GET", f"/gdc/projects/{PROJECT_ID}/styleSettings", 404)

    async with _client(backend) as client:
        with pytest.raises(TransportError) as excinfo:
            await client.get_color_palette(PROJECT_ID)

    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_set_palette_round_trips_through_style_settings():
    backend = MockGdcBackend(logged_in=True)
    colors = [Color(1, 2, 3), Color(250, 251, 252)]

    async with _client(backend) as client:
        await client.set_color_palette(PROJECT_ID, colors)
        palette = await client.get_color_palette(PROJECT_ID)

    body = backend.last_body[("PUT", f"/gdc/projects/{PROJECT_ID}/styleSettings")]
    assert body["styleSettings"]["chartPalette"][1] == {
        "guid": "guid1",
        "fill": {"r": 250, "g": 251, "b": 252},
    }
    assert palette == colors


@pytest.mark.asyncio
async def test_palette_falls_back_to_default_on_error_shaped_200():
    error = {"error": {"message": "Style settings not found", "component": "Webapp"}}

    async with _static_client(200, json=error) as client:
        palette = await client.get_color_palette("p1")

    assert palette == list(DEFAULT_PALETTE)


@pytest.mark.asyncio
async def test_palette_falls_back_to_default_when_chart_palette_is_not_a_list():
    async with _static_client(200, json={"styleSettings": {"chartPalette": None}}) as client:
        palette = await client.get_color_palette("p1")

    assert palette == list(DEFAULT_PALETTE)


@pytest.mark.asyncio
async def test_bodiless_answer_to_available_metrics_raises_sdk_error():
    async with _static_client(200, content=b"") as client:
        with pytest.raises(UnexpectedResponseError) as excinfo:
            await client.get_available_metrics("p1", ["/gdc/md/p1/obj/1"])

    assert excinfo.value.path == ["entries"]


@pytest.mark.asyncio
async def test_bodiless_answer_to_available_attributes_raises_sdk_error():
    async with _static_client(200, content=b"") as client:
        with pytest.raises(UnexpectedResponseError):
            await client.get_available_attributes("p1", ["/gdc/md/p1/obj/2"])


@pytest.mark.asyncio
async def test_listing_without_query_envelope_raises_sdk_error():
    async with _static_client(200, json={"unexpected": True}) as client:
        with pytest.raises(UnexpectedResponseError) as excinfo:
            await client.get_metrics("p1")

    assert excinfo.value.path == ["query", "entries"]
    assert "unexpected" in str(excinfo.value)


@pytest.mark.asyncio
async def test_projects_without_envelope_raise_sdk_error():
    async with _static_client(200, json={"projects": [{"noProject": {}}]}) as client:
        with pytest.raises(UnexpectedResponseError):
            await client.get_projects(PROFILE_ID)

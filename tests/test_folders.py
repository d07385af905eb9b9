# GDC Analytics SDK
# File: tests/test_folders.py
# Version: v1

"""Folder tree assembly for attributes and metrics."""

from __future__ import annotations

import pytest

from gdc_sdk import GdcClient, GdcConfig, InvalidArgumentError, TransportError
from gdc_sdk.folders import UNSORTED_TITLE, sort_folder_tree
from gdc_sdk.mock import PROJECT_ID, MockGdcBackend, obj_uri
from gdc_sdk.models import Element, FolderStructure


def _client(backend: MockGdcBackend) -> GdcClient:
    return GdcClient(config=GdcConfig(poll_interval_ms=0), transport=backend.transport())


def _titles(structure):
    return [(f.title, [i.name for i in f.items]) for f in structure]


@pytest.mark.asyncio
async def test_attribute_tree_is_sorted_with_unsorted_folder():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        structure = await client.get_folders_with_items(PROJECT_ID, "attribute")

    assert _titles(structure) == [
        ("Catalog", ["Product"]),
        ("Geography", ["City", "Region"]),
        # case-sensitive: upper case sorts before lower case
        ("Unsorted", ["Date", "account"]),
    ]
    assert all(i.type == "attribute" for f in structure for i in f.items)


@pytest.mark.asyncio
async def test_attribute_tree_covers_every_attribute_exactly_once():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        structure = await client.get_folders_with_items(PROJECT_ID, "attribute")
        attributes = await client.get_attributes(PROJECT_ID)

    uris = [i.uri for f in structure for i in f.items]
    assert sorted(uris) == sorted(a.link for a in attributes)
    assert len(uris) == len(set(uris))


@pytest.mark.asyncio
async def test_attribute_tree_only_fetches_unclaimed_attributes():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        await client.get_folders_with_items(PROJECT_ID, "attribute")

    # folder members come embedded in the dimension payloads
    assert backend.count("GET", obj_uri(100)) == 0
    assert backend.count("GET", obj_uri(130)) == 1
    assert backend.count("GET", obj_uri(140)) == 1


@pytest.mark.asyncio
async def test_metric_tree_resolves_each_metric():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        structure = await client.get_folders_with_items(PROJECT_ID, "metric")
        metrics = await client.get_metrics(PROJECT_ID)

    assert _titles(structure) == [
        ("Finance", ["Margin"]),
        ("Sales", ["Avg Price", "Orders", "Revenue"]),
        ("Unsorted", ["Headcount"]),
    ]
    uris = sorted(i.uri for f in structure for i in f.items)
    assert uris == sorted(m.link for m in metrics)
    for metric in metrics:
        assert backend.count("GET", metric.link) == 1
    assert backend.count("GET", f"/gdc/md/{PROJECT_ID}/query/folders") == 1


@pytest.mark.asyncio
async def test_unknown_type_is_rejected_before_any_request():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        with pytest.raises(InvalidArgumentError):
            await client.get_folders_with_items(PROJECT_ID, "fact")

    assert backend.calls == []


@pytest.mark.asyncio
async def test_single_detail_failure_fails_whole_tree():
    backend = MockGdcBackend(logged_in=True)
    backend.fail("GET", obj_uri(230), 500)

    async with _client(backend) as client:
        with pytest.raises(TransportError) as excinfo:
            await client.get_folders_with_items(PROJECT_ID, "metric")

    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_folder_detail_failure_fails_attribute_tree():
    backend = MockGdcBackend(logged_in=True)
    backend.fail("GET", obj_uri(910), 502)

    async with _client(backend) as client:
        with pytest.raises(TransportError):
            await client.get_folders_with_items(PROJECT_ID, "attribute")


def test_unsorted_folder_takes_part_in_title_sort():
    structure = [
        FolderStructure(title="Zeta", items=[]),
        FolderStructure(title=UNSORTED_TITLE, items=[]),
        FolderStructure(title="Alpha", items=[]),
    ]
    assert [f.title for f in sort_folder_tree(structure)] == ["Alpha", "Unsorted", "Zeta"]


def test_item_sort_is_stable_for_equal_titles():
    first = Element(type="metric", uri="/m/1", name="Same")
    second = Element(type="metric", uri="/m/2", name="Same")
    structure = [FolderStructure(title="F", items=[second, Element(type="metric", uri="/m/0", name="A"), first])]

    sort_folder_tree(structure)

    assert [i.uri for i in structure[0].items] == ["/m/0", "/m/2", "/m/1"]

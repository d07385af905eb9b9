# GDC Analytics SDK
# File: tests/test_elements.py
# Version: v1

from __future__ import annotations

import pytest

from gdc_sdk import GdcClient, GdcConfig, TransportError, UnknownObjectError
from gdc_sdk.mock import MockGdcBackend, obj_uri


def _client(backend: MockGdcBackend) -> GdcClient:
    return GdcClient(config=GdcConfig(poll_interval_ms=0), transport=backend.transport())


@pytest.mark.asyncio
async def test_element_details_keep_order_and_use_owner_titles():
    backend = MockGdcBackend(logged_in=True)
    uris = [obj_uri(200), obj_uri(111), obj_uri(230), obj_uri(101)]

    async with _client(backend) as client:
        elements = await client.get_element_details(uris)

    assert [(e.type, e.uri, e.name) for e in elements] == [
        ("metric", obj_uri(200), "Revenue"),
        ("attribute", obj_uri(111), "City"),
        ("metric", obj_uri(230), "Margin"),
        ("attribute", obj_uri(101), "Region"),
    ]
    assert elements[1].form_of == obj_uri(110)
    assert elements[0].form_of is None


@pytest.mark.asyncio
async def test_metrics_are_fetched_once_and_owners_once_each():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        await client.get_element_details([obj_uri(200), obj_uri(121)])

    assert backend.count("GET", obj_uri(200)) == 1
    assert backend.count("GET", obj_uri(121)) == 1
    assert backend.count("GET", obj_uri(120)) == 1
    assert backend.count("GET") == 3


@pytest.mark.asyncio
async def test_empty_input_makes_no_requests():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        assert await client.get_element_details([]) == []

    assert backend.calls == []


@pytest.mark.asyncio
async def test_owner_failure_fails_the_call():
    backend = MockGdcBackend(logged_in=True)
    backend.fail("GET", obj_uri(100), 500)

    async with _client(backend) as client:
        with pytest.raises(TransportError):
            await client.get_element_details([obj_uri(200), obj_uri(101)])


@pytest.mark.asyncio
async def test_non_element_objects_are_rejected():
    backend = MockGdcBackend(logged_in=True)

    async with _client(backend) as client:
        with pytest.raises(UnknownObjectError):
            await client.get_element_details([obj_uri(900)])

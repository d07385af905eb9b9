# GDC Analytics SDK
# File: objects.py
# Version: v1

"""Metadata object lookups: details, identifiers and URIs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Union

from .errors import NotFoundError, UnknownObjectError
from .http import HttpClient, unwrap
from .models import (
    AttributeObject,
    DimensionObject,
    DisplayFormObject,
    MetadataObject,
    MetricObject,
    decode_object,
)

logger = logging.getLogger(__name__)


def extract_identifier(payload: Dict[str, Any]) -> str:
    """Pick the identifier a report would use for the given object.

    Attributes (and dimensions, through their first attribute) are referred
    to by their first display form; metrics by their own identifier.
    """
    obj = decode_object(payload)
    if isinstance(obj, AttributeObject) and obj.display_forms:
        return obj.display_forms[0].meta.identifier or ""
    if isinstance(obj, DimensionObject) and obj.attributes:
        first = obj.attributes[0]
        if first.display_forms:
            return first.display_forms[0].meta.identifier or ""
    if isinstance(obj, MetricObject):
        return obj.meta.identifier or ""
    raise UnknownObjectError(payload.keys())


@dataclass
class ObjectResolver:
    http: HttpClient

    async def get_object_details(self, uri: str) -> Dict[str, Any]:
        """Raw metadata payload for ``uri``."""
        return await self.http.get(uri)

    async def get_many_object_details(self, uris: Iterable[str]) -> List[Dict[str, Any]]:
        """Details for every URI, fetched concurrently, in input order.

        The first failure propagates; requests already in flight are left to
        finish and their results are dropped.
        """
        return list(await asyncio.gather(*(self.get_object_details(u) for u in uris)))

    async def get_object(self, uri: str) -> MetadataObject:
        return decode_object(await self.get_object_details(uri))

    async def get_many_objects(self, uris: Iterable[str]) -> List[MetadataObject]:
        return [decode_object(p) for p in await self.get_many_object_details(uris)]

    async def get_object_identifier(self, uri_or_object: Union[str, Dict[str, Any]]) -> str:
        """Identifier of an object given by URI or by an already fetched payload.

        A payload is inspected without any request. Either way an
        unrecognised object raises :class:`UnknownObjectError` from the await.
        """
        if isinstance(uri_or_object, dict):
            return extract_identifier(uri_or_object)
        return extract_identifier(await self.get_object_details(uri_or_object))

    async def get_object_uri(self, project_id: str, identifier: str) -> str:
        """Resolve an identifier to the URI of its attribute or metric.

        Identifiers of display forms resolve to the owning attribute's URI,
        never to the display form itself.
        """
        result = await self.http.post(
            f"/gdc/md/{project_id}/identifiers", {"identifierToUri": [identifier]}
        )
        pairs = result.get("identifiers") if isinstance(result, dict) else None
        found = [
            i
            for i in pairs or []
            if isinstance(i, dict) and i.get("identifier") == identifier
        ]
        if not found:
            raise NotFoundError(identifier)

        obj = await self.get_object(unwrap(found[0], "uri"))
        if isinstance(obj, DisplayFormObject):
            logger.debug("%s is a display form of %s", identifier, obj.form_of)
            obj = await self.get_object(obj.form_of)

        return obj.meta.uri

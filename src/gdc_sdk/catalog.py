# GDC Analytics SDK
# File: catalog.py
# Version: v1

"""Flat listings of projects and project metadata.

Each call is a single request (``get_folders`` without a type fans out to
three) whose answer is unwrapped from the service envelope.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

from .errors import InvalidArgumentError, TransportError, UnexpectedResponseError
from .http import HttpClient, unwrap
from .models import DEFAULT_PALETTE, Color, QueryEntry

logger = logging.getLogger(__name__)

FOLDER_TYPES = ("fact", "metric", "attribute")


def _entries(result: Dict[str, Any]) -> List[QueryEntry]:
    return [QueryEntry.from_payload(e) for e in unwrap(result, "query", "entries")]


@dataclass
class Catalog:
    """Enumerators over the ``/gdc/md/{project}/query`` family and friends."""

    http: HttpClient

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def get_projects(self, profile_id: str) -> List[Dict[str, Any]]:
        """Projects available to the user with the given profile id."""
        result = await self.http.get(f"/gdc/account/profile/{profile_id}/projects")
        return [unwrap(p, "project") for p in unwrap(result, "projects")]

    async def get_current_project_id(self) -> str:
        result = await self.http.get("/gdc/app/account/bootstrap")
        project_uri = unwrap(
            result, "bootstrapResource", "current", "project", "links", "self"
        )
        return project_uri.split("/")[-1]

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    async def get_datasets(self, project_id: str) -> List[QueryEntry]:
        return _entries(await self.http.get(f"/gdc/md/{project_id}/query/datasets"))

    async def get_attributes(self, project_id: str) -> List[QueryEntry]:
        return _entries(await self.http.get(f"/gdc/md/{project_id}/query/attributes"))

    async def get_dimensions(self, project_id: str) -> List[QueryEntry]:
        """Dimensions are the folders of attributes."""
        return _entries(await self.http.get(f"/gdc/md/{project_id}/query/dimensions"))

    async def get_metrics(self, project_id: str) -> List[QueryEntry]:
        return _entries(await self.http.get(f"/gdc/md/{project_id}/query/metrics"))

    async def _get_typed_folders(self, project_id: str, type: str) -> List[QueryEntry]:
        return _entries(
            await self.http.get(f"/gdc/md/{project_id}/query/folders?type={type}")
        )

    async def get_folders(
        self, project_id: str, type: Optional[str] = None
    ) -> Union[List[QueryEntry], Dict[str, List[QueryEntry]]]:
        """Folders of one type, or all three kinds keyed by type.

        ``type`` is one of ``fact``, ``metric`` or ``attribute`` (attribute
        folders are dimensions). Without a type the three listings are
        fetched concurrently and returned as ``{fact, metric, attribute}``.
        """
        if type in ("fact", "metric"):
            return await self._get_typed_folders(project_id, type)
        if type == "attribute":
            return await self.get_dimensions(project_id)
        if type is not None:
            raise InvalidArgumentError(
                f"Unsupported folder type {type!r}; expected one of {FOLDER_TYPES}."
            )

        facts, metrics, attributes = await asyncio.gather(
            self._get_typed_folders(project_id, "fact"),
            self._get_typed_folders(project_id, "metric"),
            self.get_dimensions(project_id),
        )
        return {"fact": facts, "metric": metrics, "attribute": attributes}

    async def get_available_metrics(
        self, project_id: str, attribute_uris: Iterable[str]
    ) -> List[Any]:
        """Metrics reachable from the given attributes in the project's model."""
        result = await self.http.post(
            f"/gdc/md/{project_id}/availablemetrics", list(attribute_uris)
        )
        return unwrap(result, "entries")

    async def get_available_attributes(
        self, project_id: str, metric_uris: Iterable[str]
    ) -> List[Any]:
        """Attributes reachable from the given metrics (drill cross paths)."""
        result = await self.http.post(
            f"/gdc/md/{project_id}/drillcrosspaths", list(metric_uris)
        )
        return unwrap(result, "drillcrosspath", "links")

    # ------------------------------------------------------------------
    # Style settings
    # ------------------------------------------------------------------

    async def get_color_palette(self, project_id: str) -> List[Color]:
        """The project's chart palette, or :data:`DEFAULT_PALETTE`.

        The service answers HTTP 200 with an unusable or error-shaped body
        when the project has no custom palette; that case resolves to the
        default palette.
        """
        try:
            result = await self.http.get(f"/gdc/projects/{project_id}/styleSettings")
            palette = unwrap(result, "styleSettings", "chartPalette")
            if not isinstance(palette, list):
                raise UnexpectedResponseError(
                    ("styleSettings", "chartPalette"), body=result
                )
            return [
                Color(
                    r=unwrap(c, "fill", "r"),
                    g=unwrap(c, "fill", "g"),
                    b=unwrap(c, "fill", "b"),
                )
                for c in palette
            ]
        except (TransportError, UnexpectedResponseError) as exc:
            if isinstance(exc, TransportError) and exc.status_code != 200:
                raise
            logger.warning(
                "Project %s has no usable palette; using the default one",
                project_id,
            )
            return list(DEFAULT_PALETTE)

    async def set_color_palette(self, project_id: str, colors: Iterable[Color]) -> Any:
        payload = {
            "styleSettings": {
                "chartPalette": [
                    {"guid": f"guid{idx}", "fill": c.to_dict()}
                    for idx, c in enumerate(colors)
                ]
            }
        }
        return await self.http.put(f"/gdc/projects/{project_id}/styleSettings", payload)

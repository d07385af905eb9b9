# GDC Analytics SDK
# File: folders.py
# Version: v1

"""Folder trees of metrics or attributes with their items resolved.

Attribute folders are dimensions whose details already embed every
attribute. Metric folders only list links, so each metric needs one more
detail request. Items not claimed by any folder end up in a synthetic
``"Unsorted"`` folder, which is sorted by title like any other folder.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Sequence, Set, Type, TypeVar

from .catalog import Catalog
from .errors import InvalidArgumentError, UnknownObjectError
from .models import (
    ATTRIBUTE,
    METRIC,
    DimensionObject,
    Element,
    FolderObject,
    FolderStructure,
    MetadataObject,
    QueryEntry,
)
from .objects import ObjectResolver

logger = logging.getLogger(__name__)

UNSORTED_TITLE = "Unsorted"

_T = TypeVar("_T")


def _expect(objects: Sequence[MetadataObject], cls: Type[_T]) -> List[_T]:
    for obj in objects:
        if not isinstance(obj, cls):
            raise UnknownObjectError([obj.root])
    return list(objects)  # type: ignore[arg-type]


def _unclaimed(entries: Sequence[QueryEntry], claimed: Set[str]) -> List[str]:
    return [e.link for e in entries if e.link not in claimed]


def sort_folder_tree(structure: List[FolderStructure]) -> List[FolderStructure]:
    """Sort items inside each folder, then the folders, by title (stable)."""
    for folder in structure:
        folder.items.sort(key=lambda item: item.name)
    structure.sort(key=lambda folder: folder.title)
    return structure


@dataclass
class FolderTreeBuilder:
    catalog: Catalog
    objects: ObjectResolver

    async def get_folders_with_items(
        self, project_id: str, type: str
    ) -> List[FolderStructure]:
        """Folders of ``type`` (``metric`` or ``attribute``) with sorted items.

        All or nothing: any failed request fails the whole call.
        """
        if type not in (ATTRIBUTE, METRIC):
            raise InvalidArgumentError(
                f"Unsupported folder type {type!r}; expected 'metric' or 'attribute'."
            )

        folders = await self.catalog.get_folders(project_id, type)
        details = await self.objects.get_many_objects(f.link for f in folders)

        if type == ATTRIBUTE:
            structure = await self._attribute_tree(project_id, details)
        else:
            structure = await self._metric_tree(project_id, folders, details)

        logger.info(
            "Built %d %s folders for project %s", len(structure), type, project_id
        )
        return sort_folder_tree(structure)

    async def _attribute_tree(
        self, project_id: str, details: Sequence[MetadataObject]
    ) -> List[FolderStructure]:
        dimensions = _expect(details, DimensionObject)
        attributes = await self.catalog.get_attributes(project_id)

        claimed = {a.meta.uri for d in dimensions for a in d.attributes}
        unsorted = await self.objects.get_many_objects(_unclaimed(attributes, claimed))

        structure = [
            FolderStructure(
                title=d.meta.title,
                items=[Element.from_object(a) for a in d.attributes],
            )
            for d in dimensions
        ]
        structure.append(
            FolderStructure(
                title=UNSORTED_TITLE,
                items=[Element.from_object(a) for a in unsorted],
            )
        )
        return structure

    async def _metric_tree(
        self,
        project_id: str,
        folders: Sequence[QueryEntry],
        details: Sequence[MetadataObject],
    ) -> List[FolderStructure]:
        metric_folders = _expect(details, FolderObject)
        metrics = await self.catalog.get_metrics(project_id)

        claimed = {link for f in metric_folders for link in f.entries}
        link_groups = [f.entries for f in metric_folders]
        link_groups.append(_unclaimed(metrics, claimed))

        resolved = await asyncio.gather(
            *(self.objects.get_many_objects(links) for links in link_groups)
        )

        titles = [f.title for f in folders] + [UNSORTED_TITLE]
        return [
            FolderStructure(
                title=title,
                items=[Element.from_object(m) for m in items],
            )
            for title, items in zip(titles, resolved)
        ]

# GDC Analytics SDK
# File: client.py
# Version: v1
"""High-level client for the GDC analytics platform REST API.

Implements:

- session handling: is_logged_in(), login(), logout()
- listings: get_projects(), get_datasets(), get_attributes(), get_dimensions(),
  get_metrics(), get_folders(), get_available_metrics(),
  get_available_attributes(), get_current_project_id()
- style settings: get_color_palette(), set_color_palette()
- metadata objects: get_object_details(), get_object_identifier(),
  get_object_uri(), get_element_details()
- folder trees: get_folders_with_items()
- reports: get_report_definition(), get_data()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx

from .catalog import Catalog
from .config import GdcConfig
from .elements import ElementEnricher
from .execution import ExecutionClient
from .folders import FolderTreeBuilder
from .http import HttpClient
from .models import Color, Element, ExecutedReport, FolderStructure, QueryEntry
from .objects import ObjectResolver
from .report import get_report_definition
from .session import SessionManager


@dataclass
class GdcClient:
    """Facade wiring every SDK component over one shared :class:`HttpClient`.

    Use it as an async context manager, or call :meth:`aclose` when done.
    """

    config: GdcConfig = field(default_factory=GdcConfig)
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.http = HttpClient.from_config(self.config, transport=self.transport)
        self.session = SessionManager(self.http)
        self.catalog = Catalog(self.http)
        self.objects = ObjectResolver(self.http)
        self.folders = FolderTreeBuilder(self.catalog, self.objects)
        self.elements = ElementEnricher(self.objects)
        self.executions = ExecutionClient(self.http)

    async def __aenter__(self) -> "GdcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    # ------------------------------------------------------------------
    # Basic health
    # ------------------------------------------------------------------

    async def ping(self) -> bool:
        """Lightweight health check: a base URL is configured."""
        return bool(self.config.base_url)

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def is_logged_in(self) -> Any:
        return await self.session.is_logged_in()

    async def login(self, username: str, password: str) -> Any:
        return await self.session.login(username, password)

    async def get_current_profile_id(self) -> str:
        return await self.session.get_current_profile_id()

    async def logout(self) -> None:
        await self.session.logout()

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def get_projects(self, profile_id: str) -> List[Dict[str, Any]]:
        return await self.catalog.get_projects(profile_id)

    async def get_current_project_id(self) -> str:
        return await self.catalog.get_current_project_id()

    async def get_datasets(self, project_id: str) -> List[QueryEntry]:
        return await self.catalog.get_datasets(project_id)

    async def get_attributes(self, project_id: str) -> List[QueryEntry]:
        return await self.catalog.get_attributes(project_id)

    async def get_dimensions(self, project_id: str) -> List[QueryEntry]:
        return await self.catalog.get_dimensions(project_id)

    async def get_metrics(self, project_id: str) -> List[QueryEntry]:
        return await self.catalog.get_metrics(project_id)

    async def get_folders(
        self, project_id: str, type: Optional[str] = None
    ) -> Union[List[QueryEntry], Dict[str, List[QueryEntry]]]:
        return await self.catalog.get_folders(project_id, type)

    async def get_available_metrics(
        self, project_id: str, attribute_uris: Iterable[str]
    ) -> List[Any]:
        return await self.catalog.get_available_metrics(project_id, attribute_uris)

    async def get_available_attributes(
        self, project_id: str, metric_uris: Iterable[str]
    ) -> List[Any]:
        return await self.catalog.get_available_attributes(project_id, metric_uris)

    async def get_color_palette(self, project_id: str) -> List[Color]:
        return await self.catalog.get_color_palette(project_id)

    async def set_color_palette(self, project_id: str, colors: Iterable[Color]) -> Any:
        return await self.catalog.set_color_palette(project_id, colors)

    # ------------------------------------------------------------------
    # Metadata objects
    # ------------------------------------------------------------------

    async def get_object_details(self, uri: str) -> Dict[str, Any]:
        return await self.objects.get_object_details(uri)

    async def get_object_identifier(self, uri_or_object: Union[str, Dict[str, Any]]) -> str:
        return await self.objects.get_object_identifier(uri_or_object)

    async def get_object_uri(self, project_id: str, identifier: str) -> str:
        return await self.objects.get_object_uri(project_id, identifier)

    async def get_element_details(self, uris: Iterable[str]) -> List[Element]:
        return await self.elements.get_element_details(uris)

    async def get_folders_with_items(
        self, project_id: str, type: str
    ) -> List[FolderStructure]:
        return await self.folders.get_folders_with_items(project_id, type)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    @staticmethod
    def get_report_definition(elements: Iterable[Element]) -> Dict[str, Any]:
        return get_report_definition(elements)

    async def get_data(self, project_id: str, elements: Iterable[Any]) -> ExecutedReport:
        return await self.executions.get_data(project_id, elements)

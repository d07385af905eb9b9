# GDC Analytics SDK
# File: tools/tasks.py
# Version: v1
#
# NOTE: This module is the single place where SDK operations are exposed as
# MCP tools.  The stdio transport simply calls `register_tools(server)`.

from __future__ import annotations

import logging
import time
from dataclasses import asdict
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from ..client import GdcClient
from ..config import GdcConfig
from ..errors import GdcError
from ..mock import PROJECT_ID as MOCK_PROJECT_ID, MockGdcBackend
from ..models import Element, ExecutedReport, FolderStructure, QueryEntry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _make_error(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Small, LLM-friendly error shape used by diagnostics."""
    err: Dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return err


def _make_client(cfg: Optional[GdcConfig] = None) -> GdcClient:
    """Create a GdcClient from environment variables.

    If GDC_MOCK_MODE is truthy the client talks to an in-process mock backend
    (already logged in) instead of a real host.

    Note: Callers should prefer invoking this with *no arguments* to keep
    unit tests monkeypatch-friendly.
    """
    cfg = cfg or GdcConfig.from_env()

    if cfg.mock_mode:
        backend = MockGdcBackend(logged_in=True)
        return GdcClient(config=cfg, transport=backend.transport())

    return GdcClient(config=cfg)


async def _login_if_configured(client: GdcClient) -> None:
    cfg = client.config
    if cfg.username and cfg.password:
        await client.login(cfg.username, cfg.password)


def _project(project_id: Optional[str]) -> str:
    cfg = GdcConfig.from_env()
    project = project_id or cfg.project_id
    if not project and cfg.mock_mode:
        project = MOCK_PROJECT_ID
    if not project:
        raise GdcError("No project id given and GDC_PROJECT_ID is not set.")
    return project


def _entry_dict(entry: QueryEntry) -> Dict[str, Any]:
    return {
        "title": entry.title,
        "link": entry.link,
        "identifier": entry.identifier,
        "category": entry.category,
    }


def _element_dict(element: Element) -> Dict[str, Any]:
    return {
        "type": element.type,
        "uri": element.uri,
        "name": element.name,
        "identifier": element.identifier,
        "form_of": element.form_of,
    }


def _folder_dict(folder: FolderStructure) -> Dict[str, Any]:
    return {
        "title": folder.title,
        "items": [_element_dict(i) for i in folder.items],
    }


def _report_dict(report: ExecutedReport) -> Dict[str, Any]:
    return {
        "is_loaded": report.is_loaded,
        "headers": [dict(asdict(h), type=h.type) for h in report.headers],
        "raw_data": report.raw_data,
    }


# ---------------------------------------------------------------------------
# Core async tasks (library-style)
# ---------------------------------------------------------------------------


async def ping() -> Dict[str, Any]:
    async with _make_client() as client:
        ok = await client.ping()
    return {"ok": bool(ok)}


async def session_status() -> Dict[str, Any]:
    async with _make_client() as client:
        await _login_if_configured(client)
        try:
            await client.is_logged_in()
            logged_in = True
        except GdcError:
            logged_in = False
    return {"logged_in": logged_in}


async def list_projects() -> Dict[str, Any]:
    async with _make_client() as client:
        await _login_if_configured(client)
        profile_id = await client.get_current_profile_id()
        projects = await client.get_projects(profile_id)
        current = await client.get_current_project_id()

    items: List[Dict[str, Any]] = []
    for p in projects:
        self_link = (p.get("links") or {}).get("self", "")
        items.append(
            {
                "id": self_link.rstrip("/").split("/")[-1],
                "title": (p.get("meta") or {}).get("title"),
                "summary": (p.get("meta") or {}).get("summary"),
            }
        )
    return {"projects": items, "current_project_id": current}


async def list_folders(project_id: Optional[str] = None, type: Optional[str] = None) -> Dict[str, Any]:
    project = _project(project_id)
    async with _make_client() as client:
        await _login_if_configured(client)
        folders = await client.get_folders(project, type)

    if isinstance(folders, dict):
        data = {kind: [_entry_dict(e) for e in entries] for kind, entries in folders.items()}
    else:
        data = {type: [_entry_dict(e) for e in folders]}
    return {"project_id": project, "folders": data}


async def folders_with_items(type: str, project_id: Optional[str] = None) -> Dict[str, Any]:
    project = _project(project_id)
    async with _make_client() as client:
        await _login_if_configured(client)
        structure = await client.get_folders_with_items(project, type)

    return {
        "project_id": project,
        "type": type,
        "folders": [_folder_dict(f) for f in structure],
        "meta": {
            "folder_count": len(structure),
            "item_count": sum(len(f.items) for f in structure),
        },
    }


async def element_details(uris: List[str]) -> Dict[str, Any]:
    async with _make_client() as client:
        await _login_if_configured(client)
        elements = await client.get_element_details(uris)
    return {"elements": [_element_dict(e) for e in elements]}


async def object_uri(identifier: str, project_id: Optional[str] = None) -> Dict[str, Any]:
    project = _project(project_id)
    async with _make_client() as client:
        await _login_if_configured(client)
        uri = await client.get_object_uri(project, identifier)
    return {"project_id": project, "identifier": identifier, "uri": uri}


async def object_identifier(uri: str) -> Dict[str, Any]:
    async with _make_client() as client:
        await _login_if_configured(client)
        identifier = await client.get_object_identifier(uri)
    return {"uri": uri, "identifier": identifier}


async def report_definition(elements: List[Dict[str, Any]]) -> Dict[str, Any]:
    parsed = [Element(type=e["type"], uri=e["uri"]) for e in elements]
    return GdcClient.get_report_definition(parsed)


async def execute_report(columns: List[str], project_id: Optional[str] = None) -> Dict[str, Any]:
    project = _project(project_id)
    started = time.time()
    async with _make_client() as client:
        await _login_if_configured(client)
        report = await client.get_data(project, columns)

    out = _report_dict(report)
    out["meta"] = {
        "project_id": project,
        "row_count": len(report.raw_data),
        "elapsed_ms": int((time.time() - started) * 1000),
    }
    return out


async def color_palette(project_id: Optional[str] = None) -> Dict[str, Any]:
    project = _project(project_id)
    async with _make_client() as client:
        await _login_if_configured(client)
        palette = await client.get_color_palette(project)
    return {"project_id": project, "palette": [c.to_dict() for c in palette]}


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def _collect_config_info() -> Dict[str, Any]:
    """Redacted snapshot of the connection configuration from env."""
    cfg = GdcConfig.from_env()
    return {
        "base_url": cfg.base_url,
        "host": urlparse(cfg.base_url).hostname or cfg.base_url,
        "project_id": cfg.project_id,
        "mock_mode": bool(cfg.mock_mode),
        "verify_tls": bool(cfg.verify_tls),
        "credentials": {
            "username_configured": bool(cfg.username),
            "password_configured": bool(cfg.password),
        },
        "limits": {
            "timeout_seconds": cfg.timeout_seconds,
            "poll_interval_ms": cfg.poll_interval_ms,
            "max_polls": cfg.max_polls,
        },
    }


async def diagnostics() -> Dict[str, Any]:
    started = time.time()
    config_info = _collect_config_info()

    checks: List[Dict[str, Any]] = []
    overall_ok = True

    t0 = time.time()
    try:
        client = _make_client()
        checks.append(
            {"name": "client_init", "ok": True, "error": None, "elapsed_ms": int((time.time() - t0) * 1000)}
        )
    except Exception as exc:  # pragma: no cover
        logger.warning("Client initialisation failed: %s", exc)
        checks.append(
            {
                "name": "client_init",
                "ok": False,
                "error": _make_error("CONFIG_ERROR", str(exc)),
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )
        return {
            "ok": False,
            "mock_mode": config_info["mock_mode"],
            "config": config_info,
            "checks": checks,
            "meta": {"elapsed_ms": int((time.time() - started) * 1000)},
        }

    async with client:
        t0 = time.time()
        try:
            await _login_if_configured(client)
            await client.is_logged_in()
            checks.append({"name": "session", "ok": True, "error": None, "elapsed_ms": int((time.time() - t0) * 1000)})
        except GdcError as exc:
            overall_ok = False
            checks.append(
                {
                    "name": "session",
                    "ok": False,
                    "error": _make_error("AUTH_ERROR", str(exc)),
                    "elapsed_ms": int((time.time() - t0) * 1000),
                }
            )

        t0 = time.time()
        try:
            project_id = await client.get_current_project_id()
            checks.append(
                {
                    "name": "current_project",
                    "ok": True,
                    "project_id": project_id,
                    "error": None,
                    "elapsed_ms": int((time.time() - t0) * 1000),
                }
            )
        except GdcError as exc:
            overall_ok = False
            checks.append(
                {
                    "name": "current_project",
                    "ok": False,
                    "error": _make_error("BACKEND_ERROR", str(exc)),
                    "elapsed_ms": int((time.time() - t0) * 1000),
                }
            )

    return {
        "ok": overall_ok,
        "mock_mode": config_info["mock_mode"],
        "config": config_info,
        "checks": checks,
        "meta": {"elapsed_ms": int((time.time() - started) * 1000)},
    }


# ---------------------------------------------------------------------------
# MCP tool registration
# ---------------------------------------------------------------------------


def register_tools(server: Any) -> None:
    """Register MCP tools on an MCP Server-like instance."""
    if server is None or not hasattr(server, "tool"):
        raise ValueError(
            "register_tools(server) expects an MCP Server-like object that exposes a .tool() decorator."
        )

    @server.tool(name="gdc_ping", description="Basic health check for the GDC MCP server.")
    async def mcp_ping() -> Dict[str, Any]:
        return await ping()

    @server.tool(name="gdc_session_status", description="Report whether the configured user is logged in.")
    async def mcp_session_status() -> Dict[str, Any]:
        return await session_status()

    @server.tool(name="gdc_list_projects", description="List projects available to the logged-in user.")
    async def mcp_list_projects() -> Dict[str, Any]:
        return await list_projects()

    @server.tool(
        name="gdc_list_folders",
        description="List metric, fact or attribute folders of a project (all kinds when no type is given).",
    )
    async def mcp_list_folders(project_id: Optional[str] = None, type: Optional[str] = None) -> Dict[str, Any]:
        return await list_folders(project_id=project_id, type=type)

    @server.tool(
        name="gdc_folders_with_items",
        description="Folder tree of metrics or attributes with every item resolved, including 'Unsorted'.",
    )
    async def mcp_folders_with_items(type: str, project_id: Optional[str] = None) -> Dict[str, Any]:
        return await folders_with_items(type=type, project_id=project_id)

    @server.tool(
        name="gdc_element_details",
        description="Describe metric / attribute display form URIs with human-readable names.",
    )
    async def mcp_element_details(uris: List[str]) -> Dict[str, Any]:
        return await element_details(uris=uris)

    @server.tool(name="gdc_object_uri", description="Resolve a metadata identifier to its attribute or metric URI.")
    async def mcp_object_uri(identifier: str, project_id: Optional[str] = None) -> Dict[str, Any]:
        return await object_uri(identifier=identifier, project_id=project_id)

    @server.tool(name="gdc_object_identifier", description="Get the report identifier of a metadata object URI.")
    async def mcp_object_identifier(uri: str) -> Dict[str, Any]:
        return await object_identifier(uri=uri)

    @server.tool(
        name="gdc_report_definition",
        description="Build a grid report definition from {type, uri} elements (no network access).",
    )
    async def mcp_report_definition(elements: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await report_definition(elements=elements)

    @server.tool(
        name="gdc_execute_report",
        description="Execute a tabular report over the given columns and return headers and values.",
    )
    async def mcp_execute_report(columns: List[str], project_id: Optional[str] = None) -> Dict[str, Any]:
        return await execute_report(columns=columns, project_id=project_id)

    @server.tool(name="gdc_color_palette", description="Chart color palette of a project (default when unset).")
    async def mcp_color_palette(project_id: Optional[str] = None) -> Dict[str, Any]:
        return await color_palette(project_id=project_id)

    @server.tool(
        name="gdc_diagnostics",
        description="Run high-level health checks against the MCP server and the GDC host.",
    )
    async def mcp_diagnostics() -> Dict[str, Any]:
        return await diagnostics()

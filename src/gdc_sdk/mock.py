# GDC Analytics SDK
# File: mock.py
# Version: v1

"""In-process stand-in for the GDC REST API.

Activated by ``GDC_MOCK_MODE`` and used by the test suite. It serves a small
static project through :class:`httpx.MockTransport`, so the whole SDK stack
(transport, decoding, composition) runs exactly as against a real host.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

PROJECT_ID = "mockproject"
PROFILE_ID = "876ec68f5630b38de65852ed5d6236ff"
MOCK_USERNAME = "mock.user@example.com"


def obj_uri(obj_id: int, project_id: str = PROJECT_ID) -> str:
    return f"/gdc/md/{project_id}/obj/{obj_id}"


def _meta(obj_id: int, identifier: str, title: str, category: str) -> Dict[str, Any]:
    return {
        "uri": obj_uri(obj_id),
        "identifier": identifier,
        "title": title,
        "category": category,
    }


def _entry(meta: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "link": meta["uri"],
        "title": meta["title"],
        "identifier": meta["identifier"],
        "category": meta["category"],
    }


# (attribute id, title, identifier, dimension id or None)
_ATTRIBUTES: List[Tuple[int, str, str, Optional[int]]] = [
    (100, "Region", "attr.region", 900),
    (110, "City", "attr.city", 900),
    (120, "Product", "attr.product", 910),
    (130, "Date", "attr.date", None),
    (140, "account", "attr.account", None),
]

# (dimension id, title)
_DIMENSIONS: List[Tuple[int, str]] = [
    (900, "Geography"),
    (910, "Catalog"),
]

# (metric id, title, identifier, format, folder id or None)
_METRICS: List[Tuple[int, str, str, str, Optional[int]]] = [
    (200, "Revenue", "metric.revenue", "$#,##0.00", 800),
    (210, "Orders", "metric.orders", "#,##0", 800),
    (220, "Avg Price", "metric.avg_price", "$#,##0.00", 800),
    (230, "Margin", "metric.margin", "#,##0.0%", 810),
    (240, "Headcount", "metric.headcount", "#,##0", None),
]

# (folder id, title)
_METRIC_FOLDERS: List[Tuple[int, str]] = [
    (800, "Sales"),
    (810, "Finance"),
]

_FACT_FOLDERS: List[Tuple[int, str]] = [
    (700, "Facts"),
]

_DATASETS: List[Tuple[int, str, str]] = [
    (600, "Sales Data", "dataset.sales"),
    (610, "Employees", "dataset.employees"),
]

# Display form ids are attribute id + 1.
_DF_OFFSET = 1

DEFAULT_MOCK_PALETTE: List[Dict[str, int]] = [
    {"r": 0x11, "g": 0x22, "b": 0x33},
    {"r": 0xAA, "g": 0xBB, "b": 0xCC},
]

_OBJ_PATH = re.compile(r"^/gdc/md/(?P<project>[^/]+)/obj/(?P<id>\d+)$")
_QUERY_PATH = re.compile(r"^/gdc/md/(?P<project>[^/]+)/query/(?P<kind>\w+)$")
_TABULAR_PATH = re.compile(
    r"^/gdc/internal/projects/(?P<project>[^/]+)/experimental/executions/(?P<id>\d+)$"
)


class MockGdcBackend:
    """A canned GDC host.

    ``calls`` records every ``(method, path)`` received. ``fail(method,
    path, status)`` makes a route answer with an error status instead.
    """

    def __init__(self, logged_in: bool = False, pending_polls: int = 1) -> None:
        self.logged_in = logged_in
        self.pending_polls = pending_polls
        self.calls: List[Tuple[str, str]] = []
        self.failures: Dict[Tuple[str, str], int] = {}
        self.palette: Optional[List[Dict[str, int]]] = list(DEFAULT_MOCK_PALETTE)
        self.last_login: Optional[Dict[str, Any]] = None
        self.last_body: Dict[Tuple[str, str], Any] = {}

        self.objects: Dict[str, Dict[str, Any]] = {}
        self._executions: Dict[str, Dict[str, Any]] = {}
        self._polls: Dict[str, int] = {}
        self._build_project()

    # ------------------------------------------------------------------
    # Fixture data
    # ------------------------------------------------------------------

    def _build_project(self) -> None:
        attributes_by_dim: Dict[int, List[Dict[str, Any]]] = {d: [] for d, _ in _DIMENSIONS}
        self.attribute_entries: List[Dict[str, Any]] = []

        for attr_id, title, identifier, dim_id in _ATTRIBUTES:
            attr_meta = _meta(attr_id, identifier, title, "attribute")
            df_id = attr_id + _DF_OFFSET
            df_body = {
                "meta": _meta(df_id, f"label.{identifier[5:]}", f"{title} Name", "attributeDisplayForm"),
                "content": {"formOf": attr_meta["uri"], "default": 1},
            }
            attr_body = {
                "meta": attr_meta,
                "content": {
                    "displayForms": [df_body],
                    "dimension": obj_uri(dim_id) if dim_id else None,
                },
            }
            self.objects[attr_meta["uri"]] = {"attribute": attr_body}
            self.objects[df_body["meta"]["uri"]] = {"attributeDisplayForm": df_body}
            self.attribute_entries.append(_entry(attr_meta))
            if dim_id is not None:
                attributes_by_dim[dim_id].append(attr_body)

        self.dimension_entries: List[Dict[str, Any]] = []
        for dim_id, title in _DIMENSIONS:
            meta = _meta(dim_id, f"dim.{title.lower()}", title, "dimension")
            self.objects[meta["uri"]] = {
                "dimension": {"meta": meta, "content": {"attributes": attributes_by_dim[dim_id]}}
            }
            self.dimension_entries.append(_entry(meta))

        entries_by_folder: Dict[int, List[Dict[str, Any]]] = {f: [] for f, _ in _METRIC_FOLDERS}
        self.metric_entries: List[Dict[str, Any]] = []
        for metric_id, title, identifier, fmt, folder_id in _METRICS:
            meta = _meta(metric_id, identifier, title, "metric")
            self.objects[meta["uri"]] = {
                "metric": {"meta": meta, "content": {"format": fmt, "expression": "SELECT 1"}}
            }
            self.metric_entries.append(_entry(meta))
            if folder_id is not None:
                entries_by_folder[folder_id].append({"link": meta["uri"], "title": title})

        self.metric_folder_entries: List[Dict[str, Any]] = []
        for folder_id, title in _METRIC_FOLDERS:
            meta = _meta(folder_id, f"folder.{title.lower()}", title, "folder")
            self.objects[meta["uri"]] = {
                "folder": {
                    "meta": meta,
                    "content": {"type": ["metric"], "entries": entries_by_folder[folder_id]},
                }
            }
            self.metric_folder_entries.append(_entry(meta))

        self.fact_folder_entries = [
            _entry(_meta(folder_id, f"folder.{title.lower()}", title, "folder"))
            for folder_id, title in _FACT_FOLDERS
        ]
        self.dataset_entries = [
            _entry(_meta(ds_id, identifier, title, "dataSet"))
            for ds_id, title, identifier in _DATASETS
        ]

        self.identifiers: Dict[str, str] = {}
        for payload in self.objects.values():
            for body in payload.values():
                self.identifiers[body["meta"]["identifier"]] = body["meta"]["uri"]

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def fail(self, method: str, path: str, status: int = 500) -> None:
        self.failures[(method.upper(), path)] = status

    def count(self, method: str, path: Optional[str] = None) -> int:
        return sum(
            1
            for m, p in self.calls
            if m == method.upper() and (path is None or p == path)
        )

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.method.upper()
        path = request.url.path
        self.calls.append((method, path))

        status = self.failures.get((method, path))
        if status is not None:
            return httpx.Response(status, json={"error": {"message": f"mock failure {status}"}})

        body: Any = None
        if request.content:
            body = json.loads(request.content)
            self.last_body[(method, path)] = body

        if path == "/gdc/account/login" and method == "POST":
            return self._login(body)
        if path == "/gdc/account/token" and method == "GET":
            if not self.logged_in:
                return httpx.Response(401, json={"message": "Unauthorized"})
            return httpx.Response(200, json={"userToken": {"token": "mock-tt"}})
        if path == f"/gdc/account/login/{PROFILE_ID}" and method == "DELETE":
            self.logged_in = False
            return httpx.Response(204)
        if path == "/gdc/app/account/bootstrap" and method == "GET":
            return httpx.Response(200, json=self._bootstrap())
        if path == f"/gdc/account/profile/{PROFILE_ID}/projects" and method == "GET":
            return httpx.Response(200, json=self._projects())
        if path == f"/gdc/projects/{PROJECT_ID}/styleSettings":
            return self._style_settings(method, body)
        if path == f"/gdc/md/{PROJECT_ID}/identifiers" and method == "POST":
            return self._identifiers(body)
        if path == f"/gdc/md/{PROJECT_ID}/availablemetrics" and method == "POST":
            return httpx.Response(200, json={"entries": list(self.metric_entries)})
        if path == f"/gdc/md/{PROJECT_ID}/drillcrosspaths" and method == "POST":
            return httpx.Response(
                200, json={"drillcrosspath": {"links": list(self.attribute_entries)}}
            )
        if path == f"/gdc/internal/projects/{PROJECT_ID}/experimental/executions" and method == "POST":
            return self._execute(body)

        match = _TABULAR_PATH.match(path)
        if match and method == "GET":
            return self._tabular(path)

        match = _QUERY_PATH.match(path)
        if match and method == "GET" and match.group("project") == PROJECT_ID:
            return self._query(match.group("kind"), request.url.params.get("type"))

        if _OBJ_PATH.match(path) and method == "GET" and path in self.objects:
            return httpx.Response(200, json=self.objects[path])

        return httpx.Response(404, json={"error": {"message": f"Not found: {path}"}})

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _login(self, body: Any) -> httpx.Response:
        credentials = (body or {}).get("postUserLogin") or {}
        self.last_login = credentials
        if not credentials.get("login") or not credentials.get("password"):
            return httpx.Response(401, json={"message": "Bad credentials"})
        self.logged_in = True
        return httpx.Response(
            200,
            json={
                "userLogin": {
                    "profile": f"/gdc/account/profile/{PROFILE_ID}",
                    "state": f"/gdc/account/login/{PROFILE_ID}",
                }
            },
        )

    def _bootstrap(self) -> Dict[str, Any]:
        return {
            "bootstrapResource": {
                "accountSetting": {
                    "login": MOCK_USERNAME,
                    "links": {"self": f"/gdc/account/profile/{PROFILE_ID}"},
                },
                "current": {
                    "project": {
                        "meta": {"title": "Mock Project"},
                        "links": {"self": f"/gdc/projects/{PROJECT_ID}"},
                    }
                },
            }
        }

    def _projects(self) -> Dict[str, Any]:
        return {
            "projects": [
                {
                    "project": {
                        "meta": {"title": "Mock Project", "summary": "Static demo project."},
                        "content": {"state": "ENABLED"},
                        "links": {"self": f"/gdc/projects/{PROJECT_ID}"},
                    }
                }
            ]
        }

    def _query(self, kind: str, folder_type: Optional[str]) -> httpx.Response:
        if kind == "folders":
            entries = {
                "metric": self.metric_folder_entries,
                "fact": self.fact_folder_entries,
            }.get(folder_type or "", [])
        else:
            entries = {
                "attributes": self.attribute_entries,
                "dimensions": self.dimension_entries,
                "metrics": self.metric_entries,
                "datasets": self.dataset_entries,
            }.get(kind)
            if entries is None:
                return httpx.Response(404, json={"error": {"message": f"Unknown query {kind}"}})

        return httpx.Response(
            200,
            json={"query": {"entries": list(entries), "meta": {"category": kind}}},
        )

    def _style_settings(self, method: str, body: Any) -> httpx.Response:
        if method == "PUT":
            self.palette = [c["fill"] for c in body["styleSettings"]["chartPalette"]]
            return httpx.Response(204)
        if self.palette is None:
            # What the platform sends for projects without custom settings.
            return httpx.Response(200, content=b"")
        return httpx.Response(
            200,
            json={
                "styleSettings": {
                    "chartPalette": [
                        {"guid": f"guid{idx}", "fill": dict(c)}
                        for idx, c in enumerate(self.palette)
                    ]
                }
            },
        )

    def _identifiers(self, body: Any) -> httpx.Response:
        requested = (body or {}).get("identifierToUri") or []
        found = [
            {"identifier": i, "uri": self.identifiers[i]}
            for i in requested
            if i in self.identifiers
        ]
        return httpx.Response(200, json={"identifiers": found})

    def _column_header(self, column: str) -> Optional[Dict[str, Any]]:
        uri = self.identifiers.get(column, column)
        payload = self.objects.get(uri)
        if not payload:
            return None
        if "attributeDisplayForm" in payload or "metric" in payload:
            return payload
        return None

    def _execute(self, body: Any) -> httpx.Response:
        columns = ((body or {}).get("execution") or {}).get("columns") or []
        headers = []
        for column in columns:
            header = self._column_header(column)
            if header is None:
                return httpx.Response(400, json={"error": {"message": f"Bad column {column}"}})
            headers.append(header)

        execution_id = str(len(self._executions) + 1)
        tabular_uri = (
            f"/gdc/internal/projects/{PROJECT_ID}/experimental/executions/{execution_id}"
        )
        values = [
            [self._cell(header, row) for header in headers] for row in range(3)
        ]
        self._executions[tabular_uri] = {"tabularDataResult": {"values": values}}
        self._polls[tabular_uri] = 0

        return httpx.Response(
            201,
            json={"executionResult": {"columns": headers, "tabularDataResult": tabular_uri}},
        )

    @staticmethod
    def _cell(header: Dict[str, Any], row: int) -> Any:
        if "metric" in header:
            return str((row + 1) * 100)
        return f"{header['attributeDisplayForm']['meta']['title']} {row + 1}"

    def _tabular(self, path: str) -> httpx.Response:
        result = self._executions.get(path)
        if result is None:
            return httpx.Response(404, json={"error": {"message": "No such execution"}})
        if self._polls[path] < self.pending_polls:
            self._polls[path] += 1
            return httpx.Response(202, headers={"Location": path})
        return httpx.Response(200, json=result)

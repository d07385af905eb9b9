# GDC Analytics SDK
# File: models.py
# Version: v1

"""Domain models and payload decoding for the GDC metadata API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .errors import UnknownObjectError

ATTRIBUTE = "attribute"
METRIC = "metric"

# Sentinel column telling the executor where the metric values go.
METRIC_GROUP = "metricGroup"


# ---------------------------------------------------------------------------
# Metadata objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ObjectMeta:
    """The ``meta`` section shared by every metadata object."""

    uri: str
    identifier: Optional[str] = None
    title: str = ""
    category: Optional[str] = None

    @classmethod
    def from_payload(cls, meta: Dict[str, Any]) -> "ObjectMeta":
        return cls(
            uri=meta.get("uri", ""),
            identifier=meta.get("identifier"),
            title=meta.get("title", ""),
            category=meta.get("category"),
        )


@dataclass
class DisplayFormObject:
    """An attribute label; ``form_of`` points at the owning attribute."""

    meta: ObjectMeta
    form_of: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    root = "attributeDisplayForm"


@dataclass
class AttributeObject:
    meta: ObjectMeta
    display_forms: List[DisplayFormObject] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    root = "attribute"


@dataclass
class MetricObject:
    meta: ObjectMeta
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    root = "metric"


@dataclass
class DimensionObject:
    """An attribute folder. Its attributes are embedded in full."""

    meta: ObjectMeta
    attributes: List[AttributeObject] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    root = "dimension"


@dataclass
class FolderObject:
    """A metric (or fact) folder. Entries are links only."""

    meta: ObjectMeta
    entries: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    root = "folder"


MetadataObject = Union[
    DisplayFormObject, AttributeObject, MetricObject, DimensionObject, FolderObject
]


def _display_form(body: Dict[str, Any]) -> DisplayFormObject:
    content = body.get("content") or {}
    return DisplayFormObject(
        meta=ObjectMeta.from_payload(body.get("meta") or {}),
        form_of=content.get("formOf", ""),
        raw=body,
    )


def _attribute(body: Dict[str, Any]) -> AttributeObject:
    content = body.get("content") or {}
    return AttributeObject(
        meta=ObjectMeta.from_payload(body.get("meta") or {}),
        display_forms=[_display_form(df) for df in content.get("displayForms") or []],
        raw=body,
    )


def _metric(body: Dict[str, Any]) -> MetricObject:
    return MetricObject(
        meta=ObjectMeta.from_payload(body.get("meta") or {}),
        raw=body,
    )


def _dimension(body: Dict[str, Any]) -> DimensionObject:
    content = body.get("content") or {}
    return DimensionObject(
        meta=ObjectMeta.from_payload(body.get("meta") or {}),
        attributes=[_attribute(a) for a in content.get("attributes") or []],
        raw=body,
    )


def _folder(body: Dict[str, Any]) -> FolderObject:
    content = body.get("content") or {}
    return FolderObject(
        meta=ObjectMeta.from_payload(body.get("meta") or {}),
        entries=[e["link"] for e in content.get("entries") or [] if "link" in e],
        raw=body,
    )


# Checked in order; a payload carries exactly one of these root keys.
_DECODERS: Tuple[Tuple[str, Callable[[Dict[str, Any]], MetadataObject]], ...] = (
    ("attributeDisplayForm", _display_form),
    ("attribute", _attribute),
    ("dimension", _dimension),
    ("metric", _metric),
    ("folder", _folder),
)


def decode_object(payload: Any) -> MetadataObject:
    """Decode a metadata object payload into its typed variant.

    Raises :class:`UnknownObjectError` when no known root key is present.
    """
    if isinstance(payload, dict):
        for root, decoder in _DECODERS:
            body = payload.get(root)
            if isinstance(body, dict):
                return decoder(body)
        raise UnknownObjectError(payload.keys())
    raise UnknownObjectError()


# ---------------------------------------------------------------------------
# SDK results
# ---------------------------------------------------------------------------


@dataclass
class QueryEntry:
    """One row of a ``/query/...`` listing (datasets, folders, metrics, ...)."""

    link: str
    title: str = ""
    identifier: Optional[str] = None
    category: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None

    @classmethod
    def from_payload(cls, entry: Dict[str, Any]) -> "QueryEntry":
        return cls(
            link=entry.get("link", ""),
            title=entry.get("title", ""),
            identifier=entry.get("identifier"),
            category=entry.get("category"),
            raw=entry,
        )


@dataclass
class Element:
    """A metric or attribute usable in a report or listed in a folder."""

    type: str
    uri: str
    name: str = ""
    identifier: Optional[str] = None
    form_of: Optional[str] = None

    # Raw JSON payload from the API, for debugging / advanced use.
    raw: Optional[Dict[str, Any]] = None

    @classmethod
    def from_object(cls, obj: MetadataObject) -> "Element":
        if isinstance(obj, DisplayFormObject):
            return cls(
                type=ATTRIBUTE,
                uri=obj.meta.uri,
                name=obj.meta.title,
                identifier=obj.meta.identifier,
                form_of=obj.form_of,
                raw=obj.raw,
            )
        if isinstance(obj, AttributeObject):
            return cls(
                type=ATTRIBUTE,
                uri=obj.meta.uri,
                name=obj.meta.title,
                identifier=obj.meta.identifier,
                raw=obj.raw,
            )
        if isinstance(obj, MetricObject):
            return cls(
                type=METRIC,
                uri=obj.meta.uri,
                name=obj.meta.title,
                identifier=obj.meta.identifier,
                raw=obj.raw,
            )
        raise UnknownObjectError([obj.root])


@dataclass
class FolderStructure:
    title: str
    items: List[Element] = field(default_factory=list)


@dataclass(frozen=True)
class AttributeHeader:
    id: Optional[str]
    uri: str
    title: str

    type = "attrLabel"


@dataclass(frozen=True)
class MetricHeader:
    id: Optional[str]
    title: str
    format: Optional[str] = None

    type = "metric"


HeaderDescriptor = Union[AttributeHeader, MetricHeader]


@dataclass
class ExecutedReport:
    """Result of a tabular execution.

    Stays empty with ``is_loaded=False`` until both the headers and the
    tabular data are available.
    """

    is_loaded: bool = False
    headers: List[HeaderDescriptor] = field(default_factory=list)
    raw_data: List[List[Any]] = field(default_factory=list)


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    def to_dict(self) -> Dict[str, int]:
        return {"r": self.r, "g": self.g, "b": self.b}


DEFAULT_PALETTE: Tuple[Color, ...] = (
    Color(0x2B, 0x6B, 0xAE),
    Color(0x69, 0xAA, 0x51),
    Color(0xEE, 0xB1, 0x4C),
    Color(0xD5, 0x3C, 0x38),
    Color(0x89, 0x4D, 0x94),
    Color(0x73, 0x73, 0x73),
    Color(0x44, 0xA9, 0xBE),
    Color(0x96, 0xBD, 0x5F),
    Color(0xFD, 0x93, 0x69),
    Color(0xE1, 0x5D, 0x86),
    Color(0x7C, 0x6F, 0xAD),
    Color(0xA5, 0xA5, 0xA5),
    Color(0x7A, 0xA6, 0xD5),
    Color(0x82, 0xD0, 0x8D),
    Color(0xFF, 0xD2, 0x89),
    Color(0xF1, 0x84, 0x80),
    Color(0xBF, 0x90, 0xC6),
    Color(0xBF, 0xBF, 0xBF),
)

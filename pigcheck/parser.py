"""Import of PIG packages from internal JSON and JSON-LD documents.

The importer turns a document into a Package and leaves every
cross-item question to constraints.py. It rejects, with a
PackageImportError, documents that are too large, are not JSON, or do
not have the shape of a package.

JSON-LD documents are converted to the internal shape by:
1. renaming vocabulary terms ('@id' -> 'id', 'sh:maxCount' -> 'maxCount', ...)
2. collapsing id objects ({"@id": "o:x"} -> "o:x")
3. gathering the property values and links of each instance, which
   JSON-LD keys by their class id, into hasProperty / hasTargetLink /
   hasSourceLink
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pigcheck import messages
from pigcheck.constraints import check_constraints_for_package
from pigcheck.messages import msg
from pigcheck.models import CheckId, Package, Rsp
from pigcheck.schemas import INSTANCE_ITEM_TYPES, PigItemType, normalize_item_type, validate_item
from pigcheck.settings import settings

logger = logging.getLogger(__name__)

FROM_JSONLD: dict[str, str] = {
    "@context": "context",
    "@graph": "graph",
    "@id": "id",
    "@type": "hasClass",
    "@value": "value",
    "@language": "lang",
    "pig:itemType": "itemType",
    "pig:revision": "revision",
    "pig:priorRevision": "priorRevision",
    "rdfs:subClassOf": "specializes",
    "rdfs:subPropertyOf": "specializes",
    "pig:specializes": "specializes",
    "pig:icon": "icon",
    "xs:simpleType": "datatype",
    "sh:datatype": "datatype",
    "xs:minOccurs": "minCount",
    "sh:minCount": "minCount",
    "xs:maxOccurs": "maxCount",
    "sh:maxCount": "maxCount",
    "xs:maxLength": "maxLength",
    "sh:maxLength": "maxLength",
    "xs:pattern": "pattern",
    "sh:pattern": "pattern",
    "xs:minInclusive": "minInclusive",
    "sh:minInclusive": "minInclusive",
    "xs:maxInclusive": "maxInclusive",
    "sh:maxInclusive": "maxInclusive",
    "xs:default": "defaultValue",
    "sh:defaultValue": "defaultValue",
    "pig:eligibleProperty": "eligibleProperty",
    "pig:eligibleSourceLink": "eligibleSourceLink",
    "pig:eligibleTargetLink": "eligibleTargetLink",
    "pig:eligibleEndpoint": "eligibleEndpoint",
    "pig:eligibleValue": "eligibleValue",
    "dcterms:title": "title",
    "dcterms:description": "description",
    "dcterms:created": "created",
    "dcterms:modified": "modified",
    "dcterms:creator": "creator",
}

# attachment itemType -> the instance field it is gathered into
ATTACHMENT_FIELDS: dict[str, str] = {
    PigItemType.A_PROPERTY.value: "hasProperty",
    PigItemType.A_TARGET_LINK.value: "hasTargetLink",
    PigItemType.A_SOURCE_LINK.value: "hasSourceLink",
}

_INTERNAL_TERMS = set(FROM_JSONLD.values())


class PackageImportError(Exception):
    """A document could not be turned into a Package. Carries the status as an Rsp."""

    def __init__(self, rsp: Rsp):
        super().__init__(rsp.status_text)
        self.rsp = rsp

    @property
    def status(self) -> int:
        return self.rsp.status


# ---------------------------------------------------------------------------
# JSON-LD conversion
# ---------------------------------------------------------------------------


def rename_terms(node: Any, mapping: dict[str, str] = FROM_JSONLD) -> Any:
    """Rename the keys of all nested objects according to `mapping`."""
    if isinstance(node, list):
        return [rename_terms(n, mapping) for n in node]
    if isinstance(node, dict):
        return {mapping.get(k, k): rename_terms(v, mapping) for k, v in node.items()}
    return node


def replace_id_objects(node: Any) -> Any:
    """Replace every object that holds nothing but an id by the id string."""
    if isinstance(node, list):
        return [replace_id_objects(n) for n in node]
    if isinstance(node, dict):
        if len(node) == 1:
            key, value = next(iter(node.items()))
            if key in ("id", "@id") and isinstance(value, str):
                return value
        return {k: replace_id_objects(v) for k, v in node.items()}
    return node


def is_id_string(term: str) -> bool:
    """True for compact IRIs ('o:Title') and URIs; false for keywords and plain names."""
    return ":" in term and not term.startswith("@") and not any(c.isspace() for c in term)


def _attachment(class_id: str, obj: dict, item_type: str) -> dict:
    value = obj.get("value")
    if value is not None and obj.get("lang"):
        value = {"value": value, "lang": obj["lang"]}
    attachment = {"itemType": item_type, "hasClass": class_id, "idRef": obj.get("id")}
    if value is not None:
        attachment["value"] = value
    return attachment


def collect_attachments(item: dict) -> dict:
    """Move the class-keyed property values and links of an instance into its attachment lists."""
    result = dict(item)
    for key, val in item.items():
        if key in _INTERNAL_TERMS or not is_id_string(key):
            continue
        entries = val if isinstance(val, list) else [val]
        collected = False
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            item_type = normalize_item_type(entry.get("itemType"))
            field = ATTACHMENT_FIELDS.get(item_type)
            if field is None:
                continue
            result.setdefault(field, []).append(_attachment(key, entry, item_type))
            collected = True
        if collected:
            del result[key]
    return result


def jsonld_to_internal(doc: dict) -> dict:
    """Convert a JSON-LD package document to the internal package shape."""
    internal = replace_id_objects(rename_terms(doc))
    graph = []
    for item in internal.get("graph") or []:
        if not isinstance(item, dict):
            graph.append(item)
            continue
        if normalize_item_type(item.get("itemType")) in INSTANCE_ITEM_TYPES:
            item = collect_attachments(item)
            if isinstance(item.get("hasClass"), list) and len(item["hasClass"]) == 1:
                item["hasClass"] = item["hasClass"][0]
        graph.append(item)
    internal["graph"] = graph
    return internal


def is_jsonld(doc: dict) -> bool:
    return "@graph" in doc or "@context" in doc


# ---------------------------------------------------------------------------
# Package construction
# ---------------------------------------------------------------------------


def _describe_item_errors(graph: list[Any]) -> str:
    lines = []
    for i, raw in enumerate(graph):
        if not isinstance(raw, dict):
            lines.append(f"graph[{i}]: not an object")
            continue
        _, errors = validate_item(raw)
        lines.extend(f"graph[{i}]: {e}" for e in errors)
    return "; ".join(lines)


def parse_package(doc: Any) -> Package:
    """Build a Package from a parsed internal-JSON or JSON-LD document."""
    if not isinstance(doc, dict):
        raise PackageImportError(msg(messages.IMPORT_INVALID_PACKAGE, "JSON", "document is not an object"))

    fmt = "JSON-LD" if is_jsonld(doc) else "JSON"
    data = jsonld_to_internal(doc) if fmt == "JSON-LD" else doc

    graph = data.get("graph")
    if not isinstance(graph, list):
        raise PackageImportError(msg(messages.IMPORT_INVALID_PACKAGE, fmt, "graph is missing or not a list"))

    try:
        package = Package.model_validate(data)
    except ValidationError as e:
        details = _describe_item_errors(graph) or str(e)
        logger.error("%s package %s is malformed: %s", fmt, data.get("id"), details)
        raise PackageImportError(msg(messages.IMPORT_INVALID_PACKAGE, fmt, details)) from e

    logger.info("Loaded %s package %s with %d items", fmt, package.id, len(package.graph))
    return package


def load_package(path: str | Path) -> Package:
    """Read a package document from disk, enforcing the configured size limit."""
    path = Path(path)
    size = path.stat().st_size
    if size > settings.max_document_bytes:
        raise PackageImportError(
            msg(messages.IMPORT_TOO_LARGE, path.name, size, settings.max_document_bytes)
        )

    text = path.read_text(encoding="utf-8")
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise PackageImportError(msg(messages.IMPORT_PARSE_ERROR, path.name, str(e))) from e

    return parse_package(doc)


def import_package(
    path: str | Path,
    check_constraints: list[CheckId | str] | None = None,
) -> tuple[Package, Rsp]:
    """Load a package and validate it. Import failures raise PackageImportError."""
    package = load_package(path)
    return package, check_constraints_for_package(package, check_constraints)

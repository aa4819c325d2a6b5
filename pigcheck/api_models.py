"""Request and response models of the validation service.

Kept apart from the item schemas in schemas.py: these describe the HTTP
surface only. Field names are camelCase on the wire.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pigcheck.models import CheckId


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


# --- POST /api/validate ---


class ValidateRequest(ApiModel):
    package: dict[str, Any]
    check_constraints: list[CheckId] | None = None
    lang: str | None = None


class ValidateResponse(ApiModel):
    ok: bool
    status: int
    status_text: str


# --- POST /api/graph ---


class GraphRequest(ApiModel):
    package: dict[str, Any]


class GraphNode(ApiModel):
    id: str
    item_type: str
    title: str
    degree: int
    color: str


class GraphEdge(ApiModel):
    from_id: str
    to_id: str
    type: str


class GraphData(ApiModel):
    package_id: str | None
    nodes: list[GraphNode]
    edges: list[GraphEdge]
    cycles: list[list[str]]
    type_colors: dict[str, str]

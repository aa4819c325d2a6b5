"""FastAPI service for validating PIG packages.

Endpoints:
    GET  /api/checks     identifiers of the constraint checks, in run order
    POST /api/validate   validate a package document, return {ok, status, statusText}
    POST /api/graph      nodes, edges and specialization cycles of a package

Usage:
    python -m pigcheck.server --port 8000
"""

from __future__ import annotations

import argparse
import logging
import threading

import uvicorn
from fastapi import FastAPI, HTTPException, Request

from pigcheck import messages
from pigcheck.api_models import (
    GraphData,
    GraphEdge,
    GraphNode,
    GraphRequest,
    ValidateRequest,
    ValidateResponse,
)
from pigcheck.constraints import CHECKS, check_constraints_for_package
from pigcheck.graph import build_package_graph, build_specialization_graph, specialization_cycles
from pigcheck.messages import msg
from pigcheck.models import Rsp
from pigcheck.parser import PackageImportError, parse_package
from pigcheck.settings import settings
from pigcheck.visualizer import DEFAULT_COLOR, TYPE_COLORS

logger = logging.getLogger(__name__)

# The message language is process-wide; requests that ask for another one
# switch it for the duration of their validation.
_language_lock = threading.Lock()

app = FastAPI(title="PIG Package Validator")


def _to_response(rsp: Rsp) -> ValidateResponse:
    return ValidateResponse(ok=rsp.ok, status=rsp.status, status_text=rsp.status_text)


def _check_body_size(request: Request) -> None:
    """Apply the document size limit of load_package to a request body."""
    size = int(request.headers.get("content-length") or 0)
    if size > settings.max_document_bytes:
        raise PackageImportError(
            msg(messages.IMPORT_TOO_LARGE, "request", size, settings.max_document_bytes)
        )


@app.get("/api/checks")
def list_checks() -> list[str]:
    return [check_id.value for check_id, _ in CHECKS]


@app.post("/api/validate")
def validate(req: ValidateRequest, request: Request) -> ValidateResponse:
    """Import and validate a package. Import failures are reported like violations."""
    with _language_lock:
        previous = messages.get_language()
        if req.lang:
            messages.set_language(req.lang)
        try:
            try:
                _check_body_size(request)
                package = parse_package(req.package)
            except PackageImportError as e:
                logger.info("Rejected package on import: %s", e.rsp.status_text)
                return _to_response(e.rsp)
            rsp = check_constraints_for_package(package, req.check_constraints)
        finally:
            messages.set_language(previous)
    return _to_response(rsp)


@app.post("/api/graph")
def package_graph(req: GraphRequest, request: Request) -> GraphData:
    """Graph view of a package for rendering. A malformed package gives HTTP 422."""
    try:
        _check_body_size(request)
        package = parse_package(req.package)
    except PackageImportError as e:
        raise HTTPException(status_code=422, detail=e.rsp.model_dump(by_alias=True)) from e

    g = build_package_graph(package)
    nodes = [
        GraphNode(
            id=node_id,
            item_type=data.get("item_type", ""),
            title=data.get("title", node_id),
            degree=g.degree(node_id),
            color=TYPE_COLORS.get(data.get("item_type", ""), DEFAULT_COLOR),
        )
        for node_id, data in g.nodes(data=True)
    ]
    edges = [
        GraphEdge(from_id=src, to_id=tgt, type=data.get("type", ""))
        for src, tgt, data in g.edges(data=True)
    ]
    return GraphData(
        package_id=package.id,
        nodes=nodes,
        edges=edges,
        cycles=specialization_cycles(build_specialization_graph(package)),
        type_colors=TYPE_COLORS,
    )


def main():
    parser = argparse.ArgumentParser(description="PIG package validation service")
    parser.add_argument("--host", type=str, default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port to serve on (default: {settings.port})")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level)
    messages.set_language(settings.message_language)

    print(f"Serving PIG package validator at http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()

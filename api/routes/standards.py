"""Standards REST routes.

Mirrors the MCP tools for plain HTTP clients. Engine errors map onto
status codes: VALIDATION 422, NOT_FOUND 404, CONFLICT 409, STORE_IO 500.
"""
import asyncio
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request

from models import (
    CreateStandardRequest,
    PartialStandardMetadata,
    StandardProcess,
    StandardStatus,
    StandardTier,
    StrictModel,
    VersionBumpName,
)
from routes.deps import get_coordinator, get_index
from standards import formatters
from standards.errors import StandardsError
from standards.vocabulary import normalize_type
from value_objects import FilterOptions

router = APIRouter(prefix="/standards", tags=["standards"])

STATUS_CODES = {
    'VALIDATION': 422,
    'NOT_FOUND': 404,
    'CONFLICT': 409,
    'STORE_IO': 500,
}


class UpdateStandardBody(StrictModel):
    content: Optional[str] = None
    metadata: Optional[PartialStandardMetadata] = None
    version_bump: VersionBumpName = 'patch'


def _http_error(error: StandardsError) -> HTTPException:
    return HTTPException(status_code=STATUS_CODES.get(error.kind, 500), detail=error.to_dict())


def _filters(type=None, tier=None, process=None, tags=None, status=None) -> FilterOptions:
    return FilterOptions(
        type=normalize_type(type),
        tier=tier,
        process=process,
        tags=tuple(tags or ()),
        status=status,
    )


@router.get("")
async def list_index(
    request: Request,
    filter_type: Optional[str] = None,
    filter_tier: Optional[StandardTier] = None,
    filter_process: Optional[StandardProcess] = None,
    filter_status: Optional[StandardStatus] = None,
):
    """Hierarchical index: type -> tier -> process -> entries"""
    index = get_index(request)
    filters = _filters(filter_type, filter_tier, filter_process, status=filter_status)
    tree = await asyncio.to_thread(index.list_hierarchical, filters)
    return {
        'totalCount': formatters.count_entries(tree),
        'index': formatters.hierarchy_to_dict(tree),
    }


@router.get("/metadata")
async def get_metadata(
    request: Request,
    filter_type: Optional[str] = None,
    filter_tier: Optional[StandardTier] = None,
    filter_process: Optional[StandardProcess] = None,
    filter_tags: Optional[List[str]] = Query(default=None),
    filter_status: Optional[StandardStatus] = None,
):
    """Metadata of matching standards, without content"""
    index = get_index(request)
    filters = _filters(filter_type, filter_tier, filter_process, filter_tags, filter_status)
    entries = await asyncio.to_thread(index.get_metadata_list, filters)
    return {'count': len(entries), 'standards': [entry.to_dict() for entry in entries]}


@router.get("/search")
async def search(
    request: Request,
    query: str = Query(..., min_length=2),
    filter_type: Optional[str] = None,
    filter_tier: Optional[StandardTier] = None,
    filter_process: Optional[StandardProcess] = None,
    filter_tags: Optional[List[str]] = Query(default=None),
    limit: int = Query(default=10, ge=1, le=50),
):
    """Relevance-ranked full-text search"""
    index = get_index(request)
    filters = _filters(filter_type, filter_tier, filter_process, filter_tags)
    results = await asyncio.to_thread(index.search, query, filters, limit)
    return {
        'query': query,
        'count': len(results),
        'results': [result.to_dict() for result in results],
    }


@router.get("/{path:path}")
async def get_standard(path: str, request: Request):
    """Get one standard by path (legacy short names accepted)"""
    index = get_index(request)
    standard = await asyncio.to_thread(index.get_by_path, path)
    if standard is None:
        raise HTTPException(
            status_code=404,
            detail={'kind': 'NOT_FOUND', 'message': f"Standard not found: {path}"},
        )
    return standard.to_dict()


@router.post("", status_code=201)
async def create_standard(body: CreateStandardRequest, request: Request):
    """Create a standard at its canonical path"""
    coordinator = get_coordinator(request)
    try:
        standard = await asyncio.to_thread(
            coordinator.create, body.metadata.model_dump(), body.content, body.filename
        )
    except StandardsError as e:
        raise _http_error(e)
    return standard.to_dict()


@router.patch("/{path:path}")
async def update_standard(path: str, body: UpdateStandardBody, request: Request):
    """Update content and/or metadata, moving the file if its path changes"""
    coordinator = get_coordinator(request)
    metadata = body.metadata.model_dump(exclude_none=True) if body.metadata else None
    try:
        standard = await asyncio.to_thread(
            coordinator.update, path, body.content, metadata, body.version_bump
        )
    except StandardsError as e:
        raise _http_error(e)
    return standard.to_dict()

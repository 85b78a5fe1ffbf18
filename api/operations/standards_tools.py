"""Standards tool handlers

Translates validated requests into index and coordinator calls and
wraps the outcome as a ToolResponse. Typed engine errors become error
responses; anything else propagates to the transport.
"""
import logging
from typing import Callable

from models import (
    CreateStandardRequest,
    GetMetadataRequest,
    GetStandardRequest,
    ListIndexRequest,
    SearchRequest,
    ToolResponse,
    UpdateStandardRequest,
)
from value_objects import FilterOptions
from standards import formatters
from standards.errors import StandardsError
from standards.index import StandardsIndex
from standards.lifecycle import LifecycleCoordinator

logger = logging.getLogger(__name__)


def _tags(tags) -> tuple:
    return tuple(tags or ())


class StandardsTools:
    """One method per tool; each takes its request model"""

    def __init__(self, index: StandardsIndex, coordinator: LifecycleCoordinator):
        self.index = index
        self.coordinator = coordinator

    def list_index(self, request: ListIndexRequest) -> ToolResponse:
        return self._guard("listing standards", lambda: self._list_index(request))

    def get(self, request: GetStandardRequest) -> ToolResponse:
        return self._guard("retrieving standard", lambda: self._get(request))

    def search(self, request: SearchRequest) -> ToolResponse:
        return self._guard("searching standards", lambda: self._search(request))

    def get_metadata(self, request: GetMetadataRequest) -> ToolResponse:
        return self._guard("retrieving metadata", lambda: self._get_metadata(request))

    def create(self, request: CreateStandardRequest) -> ToolResponse:
        return self._guard("creating standard", lambda: self._create(request))

    def update(self, request: UpdateStandardRequest) -> ToolResponse:
        return self._guard("updating standard", lambda: self._update(request))

    # ============ Handlers ============

    def _list_index(self, request: ListIndexRequest) -> ToolResponse:
        filters = FilterOptions(
            type=request.filter_type,
            tier=request.filter_tier,
            process=request.filter_process,
            status=request.filter_status,
        )
        tree = self.index.list_hierarchical(filters)
        structured = {
            'totalCount': formatters.count_entries(tree),
            'index': formatters.hierarchy_to_dict(tree),
        }
        return ToolResponse.text(
            formatters.format_hierarchical_index(tree, request.response_format), structured
        )

    def _get(self, request: GetStandardRequest) -> ToolResponse:
        if request.path:
            standard = self.index.get_by_path(request.path)
            if standard is None:
                return ToolResponse.error(
                    f"Standard not found: {request.path}",
                    {'error': {'kind': 'NOT_FOUND', 'message': f"Standard not found: {request.path}"}},
                )
            standards = [standard]
        else:
            standards = self.index.get_by_metadata(
                request.type, request.tier, request.process, _tags(request.tags)
            )
            if not standards:
                return ToolResponse.text(
                    "No standards found matching the specified criteria.",
                    {'count': 0, 'standards': []},
                )

        text = (
            formatters.format_standard(standards[0], request.response_format)
            if len(standards) == 1
            else formatters.format_standards(standards, request.response_format)
        )
        return ToolResponse.text(text, {
            'count': len(standards),
            'standards': [standard.to_dict() for standard in standards],
        })

    def _search(self, request: SearchRequest) -> ToolResponse:
        filters = FilterOptions(
            type=request.filter_type,
            tier=request.filter_tier,
            process=request.filter_process,
            tags=_tags(request.filter_tags),
        )
        results = self.index.search(request.query, filters, request.limit)
        structured = {
            'query': request.query,
            'count': len(results),
            'results': [result.to_dict() for result in results],
        }
        if not results:
            return ToolResponse.text(f'No results found for query: "{request.query}"', structured)
        return ToolResponse.text(
            formatters.format_search_results(results, request.response_format), structured
        )

    def _get_metadata(self, request: GetMetadataRequest) -> ToolResponse:
        filters = FilterOptions(
            type=request.filter_type,
            tier=request.filter_tier,
            process=request.filter_process,
            tags=_tags(request.filter_tags),
            status=request.filter_status,
        )
        entries = self.index.get_metadata_list(filters)
        structured = {'count': len(entries), 'standards': [entry.to_dict() for entry in entries]}
        if not entries:
            return ToolResponse.text("No standards found matching the specified criteria.", structured)
        return ToolResponse.text(
            formatters.format_metadata_list(entries, request.response_format), structured
        )

    def _create(self, request: CreateStandardRequest) -> ToolResponse:
        standard = self.coordinator.create(
            request.metadata.model_dump(), request.content, request.filename
        )
        text = f"Created standard at {standard.path}\n\n{formatters.format_standard(standard)}"
        return ToolResponse.text(text, standard.to_dict())

    def _update(self, request: UpdateStandardRequest) -> ToolResponse:
        metadata = request.metadata.model_dump(exclude_none=True) if request.metadata else None
        standard = self.coordinator.update(
            request.path,
            content=request.content,
            metadata=metadata,
            version_bump=request.version_bump,
        )
        text = f"Updated standard {standard.path}\n\n{formatters.format_standard(standard)}"
        return ToolResponse.text(text, standard.to_dict())

    @staticmethod
    def _guard(action: str, handler: Callable[[], ToolResponse]) -> ToolResponse:
        """Turn typed engine errors into error responses"""
        try:
            return handler()
        except StandardsError as e:
            logger.warning("Error %s: %s", action, e.message)
            return ToolResponse.error(f"Error {action}: {e.message}", {'error': e.to_dict()})

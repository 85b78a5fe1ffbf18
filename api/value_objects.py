"""
Value objects for the standards engine.

Principles:
- Immutable data structures
- Named instead of primitive types (no Primitive Obsession)
- Small, focused classes with single responsibility
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from domain_models import Metadata, Standard


class VersionBump(str, Enum):
    """Semantic version increment applied on update"""
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class ResponseFormat(str, Enum):
    """Rendering requested by the caller"""
    MARKDOWN = "markdown"
    JSON = "json"


@dataclass(frozen=True)
class FilterOptions:
    """Metadata filters shared by listing, metadata and search queries.

    Replaces passing (type, tier, process, tags, status) as loose kwargs.
    Tags use AND semantics: every listed tag must be present.
    """
    type: Optional[str] = None
    tier: Optional[str] = None
    process: Optional[str] = None
    tags: Tuple[str, ...] = ()
    status: Optional[str] = None

    def matches(self, metadata: Metadata) -> bool:
        """Check whether metadata passes every supplied filter."""
        if self.type and metadata.type != self.type:
            return False
        if self.tier and metadata.tier != self.tier:
            return False
        if self.process and metadata.process != self.process:
            return False
        if self.status and metadata.status != self.status:
            return False
        return metadata.has_tags(self.tags)


@dataclass(frozen=True)
class IndexEntry:
    """Path plus metadata, without content"""
    path: str
    metadata: Metadata

    def to_dict(self) -> dict:
        return {'path': self.path, 'metadata': self.metadata.to_dict()}


@dataclass(frozen=True)
class SearchMatch:
    """A single content occurrence with its context snippet"""
    context: str
    start_index: int
    end_index: int

    def to_dict(self) -> dict:
        return {
            'context': self.context,
            'startIndex': self.start_index,
            'endIndex': self.end_index,
        }


@dataclass(frozen=True)
class SearchResult:
    """Ranked search hit.

    ``matches`` is bounded; ``match_count`` counts every occurrence
    found in metadata and content.
    """
    standard: Standard
    score: float
    match_count: int
    matches: Tuple[SearchMatch, ...] = ()
    first_offset: Optional[int] = None

    @property
    def path(self) -> str:
        return self.standard.path

    def to_dict(self) -> dict:
        return {
            'path': self.standard.path,
            'metadata': self.standard.metadata.to_dict(),
            'score': self.score,
            'matchCount': self.match_count,
            'matches': [match.to_dict() for match in self.matches],
        }


@dataclass(frozen=True)
class RelocationPlan:
    """Old and new location of a document whose canonical path changed.

    Built by the lifecycle coordinator before any write so the rename
    can be inspected and executed as one unit.
    """
    old_path: str
    new_path: str

    @property
    def moves(self) -> bool:
        return self.old_path != self.new_path

    @property
    def affected_paths(self) -> Tuple[str, ...]:
        if self.moves:
            return (self.new_path, self.old_path)
        return (self.new_path,)

    def __str__(self) -> str:
        return f"{self.old_path} -> {self.new_path}"

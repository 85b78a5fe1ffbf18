"""In-memory index over the standards on disk

The index is a pure cache of the document store: it is built by
rebuild(), changed only by refresh()/rebuild(), and every query reads
from it without touching storage.

Thread Safety:
Uses threading.RLock around every read and mutation. The lock is held
across the store read as well as the install, so a refresh can never
install a read that a later write has already superseded.
"""
import logging
import threading
from typing import Dict, List, Optional

from domain_models import Standard
from value_objects import FilterOptions, IndexEntry, SearchResult
from standards.document_store import DocumentStore
from standards.errors import StoreIOError, ValidationError
from standards.path_generator import PathGenerator, slugify
from standards.search import StandardSearcher

logger = logging.getLogger(__name__)


class StandardsIndex:
    """Rebuildable cache of path -> Standard plus derived groupings"""

    def __init__(self, store: DocumentStore, searcher: StandardSearcher = None,
                 path_generator: PathGenerator = None):
        self.store = store
        self.searcher = searcher or StandardSearcher()
        self.paths = path_generator or PathGenerator()
        self._lock = threading.RLock()
        self._documents: Dict[str, Standard] = {}

    # ============ Mutation ============

    def rebuild(self) -> int:
        """Re-read every file and install a complete replacement mapping"""
        with self._lock:
            self._documents = {standard.path: standard for standard in self.store.read_all()}
            count = len(self._documents)
        logger.info("Index rebuilt: %d standards loaded from %s", count, self.store.root)
        return count

    def refresh(self, path: str) -> Optional[Standard]:
        """Re-read one path and insert, replace or drop its entry

        A file that no longer exists or fails validation is removed from
        the index. Returns the indexed standard, if any.
        """
        with self._lock:
            try:
                standard = self.store.read(path)
            except (ValidationError, StoreIOError) as e:
                logger.error("Dropping %s from index: %s", path, e)
                standard = None

            if standard is None:
                self._documents.pop(path, None)
            else:
                self._documents[path] = standard
            return standard

    # ============ Queries ============

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def snapshot(self) -> List[Standard]:
        """All standards ordered by path"""
        with self._lock:
            return [self._documents[path] for path in sorted(self._documents)]

    def stats(self) -> dict:
        """Counts per type and status for health reporting"""
        by_type: Dict[str, int] = {}
        by_status: Dict[str, int] = {}
        standards = self.snapshot()
        for standard in standards:
            by_type[standard.metadata.type] = by_type.get(standard.metadata.type, 0) + 1
            by_status[standard.metadata.status] = by_status.get(standard.metadata.status, 0) + 1
        return {'total': len(standards), 'by_type': by_type, 'by_status': by_status}

    def list_hierarchical(self, filters: Optional[FilterOptions] = None) -> Dict[str, Dict[str, Dict[str, List[IndexEntry]]]]:
        """Group matching entries as type -> tier -> process -> [entries]

        Only nodes holding at least one entry appear. Entries within a
        bucket are ordered by path.
        """
        tree: Dict[str, Dict[str, Dict[str, List[IndexEntry]]]] = {}
        for entry in self.get_metadata_list(filters):
            metadata = entry.metadata
            bucket = tree.setdefault(metadata.type, {}).setdefault(metadata.tier, {})
            bucket.setdefault(metadata.process, []).append(entry)
        return tree

    def get_metadata_list(self, filters: Optional[FilterOptions] = None) -> List[IndexEntry]:
        """(path, metadata) pairs for every matching standard, by path"""
        filters = filters or FilterOptions()
        return [
            IndexEntry(path=standard.path, metadata=standard.metadata)
            for standard in self.snapshot()
            if filters.matches(standard.metadata)
        ]

    def get_by_path(self, path: str) -> Optional[Standard]:
        """Look a standard up by path

        Tries the exact path, the path without a leading storage-root
        directory, the bare filename, and finally a legacy filename matched
        against document slugs.
        """
        candidates = self.paths.lookup_candidates(path, self.store.root_name)
        with self._lock:
            for candidate in candidates:
                if candidate in self._documents:
                    return self._documents[candidate]
            return self._find_by_filename(candidates[-1])

    def get_by_metadata(self, type: str, tier: str, process: str, tags=None) -> List[Standard]:
        """Standards with exactly this type, tier and process

        ``tags`` requires every listed tag (AND semantics).
        """
        if not (type and tier and process):
            raise ValidationError(
                "Must provide either path or combination of type, tier, and process"
            )
        filters = FilterOptions(type=type, tier=tier, process=process, tags=tuple(tags or ()))
        return [standard for standard in self.snapshot() if filters.matches(standard.metadata)]

    def search(self, query: str, filters: Optional[FilterOptions] = None,
               limit: Optional[int] = None) -> List[SearchResult]:
        """Relevance-ranked full-text search over the current snapshot"""
        return self.searcher.search(self.snapshot(), query, filters, limit)

    def _find_by_filename(self, name: str) -> Optional[Standard]:
        """Match a bare filename against indexed filenames, then slugs

        A name shared by several documents is ambiguous and resolves to
        nothing. Caller holds the lock.
        """
        by_filename = [standard for standard in self._documents.values() if standard.filename == name]
        if by_filename:
            return self._unique(name, by_filename)

        slug = slugify(name)
        if not slug:
            return None
        by_slug = [
            standard for path, standard in self._documents.items()
            if self.paths.slug_of(path, standard.metadata) == slug
        ]
        return self._unique(name, by_slug)

    @staticmethod
    def _unique(name: str, matches: List[Standard]) -> Optional[Standard]:
        if len(matches) == 1:
            return matches[0]
        if matches:
            logger.warning(
                "Ambiguous standard name %s matches %s",
                name, ", ".join(sorted(standard.path for standard in matches)),
            )
        return None

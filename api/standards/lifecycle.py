"""Lifecycle coordinator - create and update standards

All mutations go through here: validate, stamp version and dates,
derive the canonical path, write through the store, refresh the index.
Validation happens before any write, so a rejected request leaves both
disk and index untouched.
"""
import logging
import threading
from typing import Optional

from domain_models import Metadata, Standard
from value_objects import RelocationPlan, VersionBump
from standards.document_store import DocumentStore
from standards.errors import ConflictError, NotFoundError, StoreIOError, ValidationError
from standards.index import StandardsIndex
from standards.path_generator import PathGenerator
from standards.validator import MetadataValidator, bump_version

logger = logging.getLogger(__name__)


class RelocationCommit:
    """Writes a standard to its canonical path, moving it when needed

    Two-phase: the new location is written and read back before the old
    one is deleted. If the old file cannot be removed the new copy is
    withdrawn, so the document is never reachable at two paths.
    """

    def __init__(self, store: DocumentStore, index: StandardsIndex):
        self.store = store
        self.index = index

    def execute(self, plan: RelocationPlan, metadata: Metadata, content: str) -> Standard:
        if not plan.moves:
            standard = self.store.write(plan.new_path, metadata, content)
            self.index.refresh(plan.new_path)
            return standard

        if self.store.exists(plan.new_path):
            raise ConflictError(
                f"A standard already exists at {plan.new_path}", path=plan.new_path
            )

        standard = self.store.write(plan.new_path, metadata, content)
        self._verify(plan.new_path, metadata)
        self._remove_old(plan)

        for path in plan.affected_paths:
            self.index.refresh(path)
        logger.info("Relocated standard %s", plan)
        return standard

    def _verify(self, path: str, metadata: Metadata) -> None:
        """Read the new file back before touching the old one"""
        try:
            written = self.store.read(path)
        except (ValidationError, StoreIOError) as e:
            written = None
            logger.error("Verification of %s failed: %s", path, e)
        if written is None or written.metadata != metadata:
            self._withdraw(path)
            raise StoreIOError(f"Error writing standard file {path}: verification failed")

    def _remove_old(self, plan: RelocationPlan) -> None:
        try:
            self.store.remove(plan.old_path)
        except NotFoundError:
            logger.warning("Old location %s was already gone", plan.old_path)
        except StoreIOError:
            self._withdraw(plan.new_path)
            raise

    def _withdraw(self, path: str) -> None:
        try:
            self.store.remove(path)
        except (NotFoundError, StoreIOError) as e:
            logger.error("Could not withdraw %s: %s", path, e)


class LifecycleCoordinator:
    """Orchestrates create and update

    Mutations are serialized by a single write lock so two updates of the
    same document cannot interleave their rename steps.
    """

    def __init__(self, store: DocumentStore, index: StandardsIndex,
                 validator: MetadataValidator = None, path_generator: PathGenerator = None):
        self.store = store
        self.index = index
        self.validator = validator or MetadataValidator()
        self.paths = path_generator or PathGenerator()
        self.commit = RelocationCommit(store, index)
        self._write_lock = threading.Lock()

    def create(self, metadata: dict, content: str, filename: Optional[str] = None) -> Standard:
        """Create a new standard at its canonical path

        Raises:
            ValidationError: incomplete metadata, empty content or no slug
            ConflictError: the canonical path is already taken
            StoreIOError: the write failed
        """
        self._require_content(content)
        validated = self.validator.new_metadata(metadata)
        path = self.paths.generate_path(validated, filename, content)

        with self._write_lock:
            if self.store.exists(path):
                raise ConflictError(f"A standard already exists at {path}", path=path)
            standard = self.store.write(path, validated, content)
            self.index.refresh(path)

        logger.info("Created standard %s (version %s)", path, validated.version)
        return standard

    def update(self, path: str, content: Optional[str] = None, metadata: Optional[dict] = None,
               version_bump=VersionBump.PATCH) -> Standard:
        """Update content and/or metadata, bumping the version

        An explicit ``metadata['version']`` is used as given (it may not
        decrease); otherwise the current version is bumped by
        ``version_bump``. When the canonical path changes the file moves.

        Raises:
            ValidationError: nothing to update or invalid metadata
            NotFoundError: no standard at path
            ConflictError: the new canonical path is taken by another standard
            StoreIOError: a filesystem step failed
        """
        if content is None and not metadata:
            raise ValidationError("Must provide either content or metadata to update")
        if content is not None:
            self._require_content(content)

        with self._write_lock:
            existing = self._load(path)
            merged = self.validator.merge_update(existing.metadata, metadata or {})
            if not (metadata or {}).get('version'):
                merged = merged.with_changes(version=bump_version(existing.metadata.version, version_bump))

            plan = self.plan_relocation(existing, merged)
            standard = self.commit.execute(
                plan, merged, content if content is not None else existing.content
            )

        logger.info(
            "Updated standard %s (version %s -> %s)",
            standard.path, existing.metadata.version, merged.version,
        )
        return standard

    def plan_relocation(self, existing: Standard, metadata: Metadata) -> RelocationPlan:
        """Where the document lives now and where its metadata says it belongs"""
        slug = self.paths.slug_of(existing.path, existing.metadata)
        return RelocationPlan(old_path=existing.path, new_path=self.paths.compose(metadata, slug))

    def _load(self, path: str) -> Standard:
        """Fetch the current on-disk version of an indexed standard"""
        indexed = self.index.get_by_path(path)
        if indexed is None:
            raise NotFoundError(f"Standard not found: {path}")
        current = self.store.read(indexed.path)
        if current is None:
            self.index.refresh(indexed.path)
            raise NotFoundError(f"Standard not found: {path}")
        return current

    @staticmethod
    def _require_content(content) -> None:
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("Content must not be empty", field="content")

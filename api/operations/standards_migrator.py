"""Moves legacy standard files onto their canonical paths

Re-applies metadata normalization and path derivation to every file
under the storage root. Dry-run by default: the plan is computed and
reported, nothing is written.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from standards.document_store import DocumentStore
from standards.errors import StandardsError
from standards.path_generator import PathGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationAction:
    """What happens to one file"""
    path: str
    action: str  # move | rewrite | skip | keep
    new_path: Optional[str] = None
    reason: Optional[str] = None

    def __str__(self) -> str:
        if self.action == 'move':
            return f"Will move: {self.path} -> {self.new_path}"
        if self.action == 'rewrite':
            return f"Will update frontmatter: {self.path} ({self.reason})"
        if self.action == 'skip':
            return f"Skipping {self.path}: {self.reason}"
        return f"Unchanged: {self.path}"


class StandardsMigrator:
    """Plans and applies canonical-path migration"""

    def __init__(self, store: DocumentStore, path_generator: PathGenerator = None):
        self.store = store
        self.paths = path_generator or PathGenerator()

    def plan(self) -> List[MigrationAction]:
        """Decide an action for every markdown file under the root"""
        actions = []
        taken = set()
        for file_path in self.store.walker.walk():
            actions.append(self._plan_file(self.store.relative(file_path), taken))
        return actions

    def run(self, apply: bool = False) -> List[MigrationAction]:
        """Compute the plan and, when ``apply`` is set, execute it"""
        actions = self.plan()
        for action in actions:
            logger.debug("%s", action)
            if apply:
                self._apply(action)
        return actions

    def _plan_file(self, path: str, taken: set) -> MigrationAction:
        try:
            text = self.store.resolve(path).read_text(encoding='utf-8')
            raw, _ = self.store.parser.split(text)
            standard = self.store.parser.parse(text, path)
        except (OSError, UnicodeDecodeError, StandardsError) as e:
            return MigrationAction(path=path, action='skip', reason=str(e))

        slug = self.paths.slug_of(path, standard.metadata)
        new_path = self.paths.compose(standard.metadata, slug)

        if new_path != path:
            if new_path in taken or self.store.exists(new_path):
                return MigrationAction(path=path, action='skip', reason=f"target {new_path} already exists")
            taken.add(new_path)
            return MigrationAction(path=path, action='move', new_path=new_path)

        taken.add(path)
        if raw.get('type') != standard.metadata.type:
            return MigrationAction(
                path=path, action='rewrite', new_path=path,
                reason=f"type {raw.get('type')} -> {standard.metadata.type}",
            )
        return MigrationAction(path=path, action='keep')

    def _apply(self, action: MigrationAction) -> None:
        if action.action not in ('move', 'rewrite'):
            return
        standard = self.store.read(action.path)
        self.store.write(action.new_path, standard.metadata, standard.content)
        if action.action == 'move':
            self.store.remove(action.path)

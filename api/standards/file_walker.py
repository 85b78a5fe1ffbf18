from pathlib import Path
from typing import Iterator

from standards.file_filter import FileFilterPolicy
from standards.vocabulary import MARKDOWN_EXTENSION


class FileWalker:
    """Walks the storage root for standard files

    Refactored following Sandi Metz principles:
    - Dependency Injection: filter_policy injected vs. hardcoded
    - Single Responsibility: Only handles directory walking
    """

    def __init__(self, base_path: Path, extensions: set = None, filter_policy: FileFilterPolicy = None):
        self.base_path = base_path
        self.extensions = extensions or {MARKDOWN_EXTENSION}
        self.filter_policy = filter_policy or FileFilterPolicy()

    def walk(self) -> Iterator[Path]:
        """Yield supported files in a stable order"""
        if not self.base_path.exists():
            return
        yield from sorted(self._walk_files())

    def _walk_files(self):
        """Walk all files"""
        for file_path in self.base_path.rglob("*"):
            if self._is_supported(file_path) and not self._is_excluded(file_path):
                yield file_path

    def _is_supported(self, path: Path) -> bool:
        """Check if file is supported"""
        if not path.is_file():
            return False
        return path.suffix.lower() in self.extensions

    def _is_excluded(self, path: Path) -> bool:
        return self.filter_policy.should_exclude(path.relative_to(self.base_path))

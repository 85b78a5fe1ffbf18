"""Document store - markdown files under the storage root

Owns the on-disk layout. Paths handed in and out are relative to the
storage root and use forward slashes.
"""
import logging
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import List, Optional

from domain_models import Metadata, Standard
from standards.errors import NotFoundError, StoreIOError, ValidationError
from standards.file_walker import FileWalker
from standards.frontmatter_parser import FrontmatterParser

logger = logging.getLogger(__name__)


class DocumentStore:
    """Reads and writes standard files

    Writes go to a hidden temp file in the target directory and are moved
    into place with os.replace, so readers see either the old file or the
    complete new one.
    """

    def __init__(self, root: Path, parser: FrontmatterParser = None, walker: FileWalker = None):
        self.root = Path(root)
        self.parser = parser or FrontmatterParser()
        self.walker = walker or FileWalker(self.root)

    @property
    def root_name(self) -> str:
        return self.root.name

    def ensure_root(self) -> None:
        """Create the storage root if it does not exist"""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Cannot create standards directory {self.root}: {e}")

    def resolve(self, path: str) -> Path:
        """Map a relative path onto the filesystem, refusing escapes"""
        relative = PurePosixPath(path.replace('\\', '/'))
        if not path or relative.is_absolute() or '..' in relative.parts:
            raise ValidationError(f"Invalid standard path: {path}", field="path")
        return self.root.joinpath(*relative.parts)

    def relative(self, file_path: Path) -> str:
        return file_path.relative_to(self.root).as_posix()

    def exists(self, path: str) -> bool:
        return self.resolve(path).is_file()

    def read(self, path: str) -> Optional[Standard]:
        """Read and parse one file, None when it does not exist

        Raises:
            ValidationError: if the frontmatter is invalid
            StoreIOError: if the file cannot be read
        """
        file_path = self.resolve(path)
        if not file_path.is_file():
            return None
        try:
            text = file_path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StoreIOError(f"Error reading standard file {path}: {e}")
        return self.parser.parse(text, path)

    def read_all(self) -> List[Standard]:
        """Parse every standard file under the root

        A file that fails to read or validate is logged and skipped.
        """
        standards = []
        for file_path in self.walker.walk():
            path = self.relative(file_path)
            try:
                standard = self.read(path)
            except (ValidationError, StoreIOError) as e:
                logger.error("Skipping %s: %s", path, e)
                continue
            if standard is not None:
                standards.append(standard)
        return standards

    def write(self, path: str, metadata: Metadata, content: str) -> Standard:
        """Serialize and atomically write a standard

        Raises:
            StoreIOError: if any filesystem step fails
        """
        file_path = self.resolve(path)
        text = self.parser.serialize(metadata, content)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            self._atomic_write(file_path, text)
        except OSError as e:
            raise StoreIOError(f"Error writing standard file {path}: {e}")
        return Standard(metadata=metadata, content=content.strip(), path=path)

    def remove(self, path: str) -> None:
        """Delete a standard file

        Raises:
            NotFoundError: if there is no file at path
            StoreIOError: if deletion fails
        """
        file_path = self.resolve(path)
        try:
            file_path.unlink()
        except FileNotFoundError:
            raise NotFoundError(f"Standard not found: {path}")
        except OSError as e:
            raise StoreIOError(f"Error deleting standard file {path}: {e}")

    @staticmethod
    def _atomic_write(file_path: Path, text: str) -> None:
        """Write via temp file + os.replace in the same directory"""
        fd, tmp_name = tempfile.mkstemp(
            dir=str(file_path.parent), prefix=f".{file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, file_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

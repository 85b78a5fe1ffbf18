"""Canonical path derivation

A standard lives at ``{type}-{tier}-{process}-{slug}-{status}.md``
relative to the storage root. The path is derived from metadata, so any
change to those four fields moves the file.
"""
import re
from pathlib import PurePosixPath
from typing import List, Optional

from domain_models import Metadata
from standards.errors import ValidationError
from standards.vocabulary import MARKDOWN_EXTENSION

_NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]+')
_HEADING = re.compile(r'^\s*#{1,6}\s+(.+?)\s*#*\s*$')


def slugify(text: str) -> str:
    """Lower-case, collapse non-alphanumeric runs to '-', trim hyphens"""
    if text.lower().endswith(MARKDOWN_EXTENSION):
        text = text[:-len(MARKDOWN_EXTENSION)]
    return _NON_ALPHANUMERIC.sub('-', text.lower()).strip('-')


def title_of(content: str) -> str:
    """First markdown heading of the content, else its first non-empty line"""
    lines = [line for line in content.splitlines() if line.strip()]
    for line in lines:
        match = _HEADING.match(line)
        if match:
            return match.group(1)
    return lines[0].strip() if lines else ""


class PathGenerator:
    """Derives canonical relative paths from metadata and a slug

    Stateless; the same (metadata, slug) pair always gives the same path.
    """

    def generate_path(self, metadata: Metadata, slug_hint: Optional[str] = None,
                      content: str = "") -> str:
        """Compose the canonical filename

        Args:
            metadata: Validated metadata
            slug_hint: Filename or title to derive the slug from
            content: Markdown body, used for the title when no hint is given

        Raises:
            ValidationError: if no usable slug can be derived
        """
        source = slug_hint if slug_hint else title_of(content)
        slug = slugify(source)
        if not slug:
            raise ValidationError(
                "Cannot derive a filename: provide a filename or a content title",
                field="filename",
            )
        return self.compose(metadata, slug)

    @staticmethod
    def compose(metadata: Metadata, slug: str) -> str:
        return (
            f"{metadata.type}-{metadata.tier}-{metadata.process}-"
            f"{slug}-{metadata.status}{MARKDOWN_EXTENSION}"
        )

    @staticmethod
    def prefix(metadata: Metadata) -> str:
        return f"{metadata.type}-{metadata.tier}-{metadata.process}-"

    @staticmethod
    def suffix(metadata: Metadata) -> str:
        return f"-{metadata.status}{MARKDOWN_EXTENSION}"

    def slug_of(self, path: str, metadata: Metadata) -> str:
        """Recover the slug of a document from its current filename

        Canonical filenames give back exactly the slug they were built
        from; legacy filenames are slugified whole.
        """
        name = PurePosixPath(path).name
        prefix, suffix = self.prefix(metadata), self.suffix(metadata)
        if name.startswith(prefix) and name.endswith(suffix):
            slug = name[len(prefix):-len(suffix)]
            if slug:
                return slug
        return slugify(name)

    @staticmethod
    def lookup_candidates(path: str, root_name: Optional[str] = None) -> List[str]:
        """Backward-compatible forms a lookup may try, most specific first

        Accepts the path itself, the path with a leading ``<root_name>/``
        removed and the bare filename.
        """
        normalized = path.replace('\\', '/')
        if normalized.startswith('./'):
            normalized = normalized[2:]
        candidates = [normalized]
        if root_name and normalized.startswith(f"{root_name}/"):
            candidates.append(normalized[len(root_name) + 1:])
        name = PurePosixPath(normalized).name
        if name and name not in candidates:
            candidates.append(name)
        return candidates

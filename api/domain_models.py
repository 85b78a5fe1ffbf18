"""Domain models for the standards knowledge base"""
from dataclasses import dataclass, replace
from datetime import date
from typing import Tuple


@dataclass(frozen=True)
class Metadata:
    """Validated, canonical metadata of a single standard

    Only MetadataValidator builds these, so every instance already
    satisfies the vocabulary, version and date rules.
    """
    type: str
    tier: str
    process: str
    tags: Tuple[str, ...]
    version: str
    created: date
    updated: date
    author: str
    status: str

    def with_changes(self, **changes) -> 'Metadata':
        """Return a copy with the given fields replaced"""
        return replace(self, **changes)

    def has_tags(self, tags) -> bool:
        """True when every given tag is present (AND semantics)"""
        return all(tag in self.tags for tag in tags or ())

    def to_dict(self) -> dict:
        """Plain JSON-compatible representation"""
        return {
            'type': self.type,
            'tier': self.tier,
            'process': self.process,
            'tags': list(self.tags),
            'version': self.version,
            'created': self.created.isoformat(),
            'updated': self.updated.isoformat(),
            'author': self.author,
            'status': self.status,
        }

    def to_frontmatter(self) -> dict:
        """Representation written to the YAML frontmatter block

        Dates stay date objects so YAML emits bare ``YYYY-MM-DD`` values.
        """
        data = self.to_dict()
        data['created'] = self.created
        data['updated'] = self.updated
        return data


@dataclass(frozen=True)
class Standard:
    """A (metadata, content, path) triple

    ``path`` is relative to the storage root; ``content`` is the trimmed
    markdown body without frontmatter.
    """
    metadata: Metadata
    content: str
    path: str

    @property
    def filename(self) -> str:
        return self.path.rsplit('/', 1)[-1]

    def to_dict(self) -> dict:
        return {
            'path': self.path,
            'metadata': self.metadata.to_dict(),
            'content': self.content,
        }

"""Standards engine: validation, paths, storage, index and lifecycle"""
from standards.document_store import DocumentStore
from standards.errors import (
    ConflictError,
    InvalidVersionError,
    NotFoundError,
    StandardsError,
    StoreIOError,
    ValidationError,
)
from standards.frontmatter_parser import FrontmatterParser
from standards.index import StandardsIndex
from standards.lifecycle import LifecycleCoordinator, RelocationCommit
from standards.path_generator import PathGenerator, slugify
from standards.validator import MetadataValidator, bump_version

__all__ = [
    'ConflictError',
    'DocumentStore',
    'FrontmatterParser',
    'InvalidVersionError',
    'LifecycleCoordinator',
    'MetadataValidator',
    'NotFoundError',
    'PathGenerator',
    'RelocationCommit',
    'StandardsError',
    'StandardsIndex',
    'StoreIOError',
    'ValidationError',
    'bump_version',
    'slugify',
]

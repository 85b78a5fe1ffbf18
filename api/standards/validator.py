"""Metadata validation and version management

Every ingestion point (frontmatter on disk, create and update payloads)
goes through MetadataValidator, so downstream components only ever see
canonical Metadata instances.
"""
import re
from datetime import date, datetime
from typing import Callable, Dict, Tuple

from domain_models import Metadata
from value_objects import VersionBump
from standards.errors import InvalidVersionError, ValidationError
from standards.vocabulary import (
    INITIAL_VERSION,
    REQUIRED_FIELDS,
    VALID_PROCESSES,
    VALID_STATUSES,
    VALID_TIERS,
    VALID_TYPES,
    normalize_type,
)

VERSION_PATTERN = re.compile(r'^\d+\.\d+\.\d+$')
ISO_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')

_ENUMERATIONS = {
    'type': VALID_TYPES,
    'tier': VALID_TIERS,
    'process': VALID_PROCESSES,
    'status': VALID_STATUSES,
}


def parse_version(version) -> Tuple[int, int, int]:
    """Split a semver string into its three integer parts"""
    if not isinstance(version, str) or not VERSION_PATTERN.match(version):
        raise InvalidVersionError()
    major, minor, patch = (int(part) for part in version.split('.'))
    return major, minor, patch


def bump_version(version: str, kind=VersionBump.PATCH) -> str:
    """Increment a semantic version

    major resets minor and patch, minor resets patch.
    """
    major, minor, patch = parse_version(version)
    try:
        kind = VersionBump(kind)
    except ValueError:
        raise ValidationError(f"Invalid version bump type: {kind}", field="version_bump")

    if kind is VersionBump.MAJOR:
        return f"{major + 1}.0.0"
    if kind is VersionBump.MINOR:
        return f"{major}.{minor + 1}.0"
    return f"{major}.{minor}.{patch + 1}"


class MetadataValidator:
    """Normalizes and validates standard metadata

    Pure with respect to its arguments: inputs are never mutated, a new
    Metadata is returned instead. ``clock`` supplies today's date.
    """

    def __init__(self, clock: Callable[[], date] = date.today):
        self.clock = clock

    def today(self) -> date:
        return self.clock()

    def validate(self, raw) -> Metadata:
        """Validate a complete metadata mapping

        Unknown keys are ignored; missing required keys are rejected.

        Raises:
            ValidationError: naming the first offending field
        """
        if not isinstance(raw, dict):
            raise ValidationError("Invalid metadata format: expected a mapping")

        for name in REQUIRED_FIELDS:
            if raw.get(name) is None:
                raise ValidationError(f"Missing required metadata field: {name}", field=name)

        fields = self.validate_partial(raw)
        metadata = Metadata(**{name: fields[name] for name in REQUIRED_FIELDS})
        self._check_date_order(metadata)
        return metadata

    def validate_partial(self, raw) -> Dict:
        """Validate only the fields present in ``raw``

        Used for update payloads. Keys with a None value count as absent.
        """
        if not isinstance(raw, dict):
            raise ValidationError("Invalid metadata format: expected a mapping")

        cleaned = {}
        for name in REQUIRED_FIELDS:
            value = raw.get(name)
            if value is None:
                continue
            cleaned[name] = self._clean_field(name, value)
        return cleaned

    def new_metadata(self, raw) -> Metadata:
        """Build metadata for a document that does not exist yet

        Assigns the initial version and stamps both dates with today.
        """
        if not isinstance(raw, dict):
            raise ValidationError("Invalid metadata format: expected a mapping")
        today = self.today()
        stamped = dict(raw)
        stamped.update(version=INITIAL_VERSION, created=today, updated=today)
        return self.validate(stamped)

    def merge_update(self, existing: Metadata, partial) -> Metadata:
        """Apply a partial update on top of existing metadata

        ``updated`` is always forced to today. ``created`` may be repeated
        but never changed, and an explicit version may not move backwards.
        """
        cleaned = self.validate_partial(partial or {})

        if 'created' in cleaned and cleaned['created'] != existing.created:
            raise ValidationError(
                "Cannot modify the created date of an existing standard",
                field="created",
            )
        if 'version' in cleaned and parse_version(cleaned['version']) < parse_version(existing.version):
            raise InvalidVersionError(
                f"Version cannot decrease from {existing.version} to {cleaned['version']}"
            )

        cleaned['updated'] = self.today()
        merged = existing.with_changes(**cleaned)
        self._check_date_order(merged)
        return merged

    def _clean_field(self, name: str, value):
        """Normalize and check a single field"""
        if name == 'type':
            value = normalize_type(value)
        if name in _ENUMERATIONS:
            return self._check_enum(name, value)
        if name == 'tags':
            return self._clean_tags(value)
        if name == 'version':
            parse_version(value)
            return value
        if name in ('created', 'updated'):
            return self._parse_date(name, value)
        if name == 'author':
            if not isinstance(value, str):
                raise ValidationError("Author must be a string", field="author")
            return value
        return value

    @staticmethod
    def _check_enum(name: str, value) -> str:
        allowed = _ENUMERATIONS[name]
        if value not in allowed:
            raise ValidationError(
                f"Invalid {name} '{value}' (expected one of: {', '.join(allowed)})",
                field=name,
            )
        return value

    @staticmethod
    def _clean_tags(value) -> Tuple[str, ...]:
        """Tags form a set: duplicates dropped, first-seen order kept"""
        if not isinstance(value, (list, tuple)):
            raise ValidationError("Tags must be a list of strings", field="tags")
        tags = []
        for tag in value:
            if not isinstance(tag, str):
                raise ValidationError("Tags must be a list of strings", field="tags")
            if tag not in tags:
                tags.append(tag)
        return tuple(tags)

    @staticmethod
    def _parse_date(name: str, value) -> date:
        """Accept ISO strings and the date objects YAML produces"""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and ISO_DATE_PATTERN.match(value):
            try:
                return date.fromisoformat(value)
            except ValueError:
                pass
        raise ValidationError(
            f"Invalid {name} date format (must be ISO: YYYY-MM-DD)",
            field=name,
        )

    @staticmethod
    def _check_date_order(metadata: Metadata) -> None:
        if metadata.updated < metadata.created:
            raise ValidationError(
                f"Updated date {metadata.updated} precedes created date {metadata.created}",
                field="updated",
            )

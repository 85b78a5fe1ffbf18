"""Frontmatter codec for standard files

Single Responsibility: turn file text into (metadata mapping, body) and
back. Metadata validation is delegated to MetadataValidator.
"""

import re
from typing import Dict, Optional, Tuple

import yaml

from domain_models import Metadata, Standard
from standards.errors import ValidationError
from standards.validator import MetadataValidator


class FrontmatterParser:
    """Parse and serialize YAML frontmatter markdown files

    Handles YAML frontmatter blocks (--- ... ---) at the start of a file,
    followed by a blank line and the markdown body.
    """

    def __init__(self, validator: Optional[MetadataValidator] = None):
        """Initialize parser with frontmatter regex"""
        self.validator = validator or MetadataValidator()
        self.frontmatter_pattern = re.compile(
            r'^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)', re.DOTALL
        )

    def extract_frontmatter(self, text: str) -> Optional[Dict]:
        """Extract YAML frontmatter from text

        Returns:
            Dict of frontmatter data, or None if not present/invalid
        """
        match = self.frontmatter_pattern.match(text)
        if not match:
            return None

        try:
            data = yaml.safe_load(match.group(1))
        except yaml.YAMLError:
            return None
        return data if isinstance(data, dict) else None

    def remove_frontmatter(self, text: str) -> str:
        """Remove frontmatter from text"""
        return self.frontmatter_pattern.sub('', text, count=1)

    def split(self, text: str) -> Tuple[Dict, str]:
        """Split file text into frontmatter mapping and trimmed body

        Raises:
            ValidationError: if the frontmatter block is missing or not a mapping
        """
        frontmatter = self.extract_frontmatter(text)
        if frontmatter is None:
            raise ValidationError("Missing or malformed frontmatter block")
        return frontmatter, self.remove_frontmatter(text).strip()

    def parse(self, text: str, path: str) -> Standard:
        """Parse file text into a validated Standard

        Unknown frontmatter keys are ignored; missing required keys reject
        the file.
        """
        frontmatter, body = self.split(text)
        try:
            metadata = self.validator.validate(frontmatter)
        except ValidationError as e:
            raise ValidationError(f"Invalid metadata format in {path}: {e.message}", field=e.field)
        return Standard(metadata=metadata, content=body, path=path)

    @staticmethod
    def serialize(metadata: Metadata, content: str) -> str:
        """Render metadata and body back into file text"""
        header = yaml.safe_dump(
            metadata.to_frontmatter(),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
        return f"---\n{header}---\n\n{content.strip()}\n"

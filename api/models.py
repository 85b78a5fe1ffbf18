"""Request and response models

These models are the validated-input boundary: everything past them
receives well-typed values with legacy spellings already normalized.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from standards.vocabulary import normalize_type

StandardType = Literal['principle', 'standard', 'practice', 'tech-stack', 'process']
StandardTier = Literal['frontend', 'backend', 'database', 'infrastructure', 'security']
StandardProcess = Literal['development', 'testing', 'delivery', 'operations']
StandardStatus = Literal['active', 'draft', 'deprecated']
ResponseFormatName = Literal['markdown', 'json']
VersionBumpName = Literal['major', 'minor', 'patch']

MAX_SEARCH_LIMIT = 50


class StrictModel(BaseModel):
    """Base for tool inputs: unknown fields are rejected"""
    model_config = ConfigDict(extra='forbid')


class ListIndexRequest(StrictModel):
    filter_type: Optional[StandardType] = Field(default=None, description="Filter by standard type")
    filter_tier: Optional[StandardTier] = Field(default=None, description="Filter by tier")
    filter_process: Optional[StandardProcess] = Field(default=None, description="Filter by process")
    filter_status: Optional[StandardStatus] = Field(default=None, description="Filter by status")
    response_format: ResponseFormatName = Field(default='markdown', description="Output format")

    @field_validator('filter_type', mode='before')
    @classmethod
    def _normalize_type(cls, value):
        return normalize_type(value)


class GetStandardRequest(StrictModel):
    path: Optional[str] = Field(
        default=None,
        description=(
            "Exact file path relative to the standards directory "
            "(e.g. standard-backend-development-spring-boot-security-active.md). "
            "Shorter legacy names such as spring-boot-security.md are accepted."
        ),
    )
    type: Optional[StandardType] = Field(default=None, description="Standard type to search for")
    tier: Optional[StandardTier] = Field(default=None, description="Tier to search for")
    process: Optional[StandardProcess] = Field(default=None, description="Process to search for")
    tags: Optional[List[str]] = Field(default=None, description="Tags to filter by (must match all)")
    response_format: ResponseFormatName = 'markdown'

    @field_validator('type', mode='before')
    @classmethod
    def _normalize_type(cls, value):
        return normalize_type(value)

    @model_validator(mode='after')
    def _path_or_combination(self):
        if not self.path and not (self.type and self.tier and self.process):
            raise ValueError("Must provide either path or combination of type, tier, and process")
        return self


class SearchRequest(StrictModel):
    query: str = Field(..., min_length=2, description="Search query string (minimum 2 characters)")
    filter_type: Optional[StandardType] = None
    filter_tier: Optional[StandardTier] = None
    filter_process: Optional[StandardProcess] = None
    filter_tags: Optional[List[str]] = None
    limit: int = Field(default=10, ge=1, le=MAX_SEARCH_LIMIT,
                       description=f"Maximum number of results to return (1-{MAX_SEARCH_LIMIT})")
    response_format: ResponseFormatName = 'markdown'

    @field_validator('filter_type', mode='before')
    @classmethod
    def _normalize_type(cls, value):
        return normalize_type(value)


class GetMetadataRequest(StrictModel):
    filter_type: Optional[StandardType] = None
    filter_tier: Optional[StandardTier] = None
    filter_process: Optional[StandardProcess] = None
    filter_tags: Optional[List[str]] = None
    filter_status: Optional[StandardStatus] = None
    response_format: ResponseFormatName = 'markdown'

    @field_validator('filter_type', mode='before')
    @classmethod
    def _normalize_type(cls, value):
        return normalize_type(value)


class NewStandardMetadata(StrictModel):
    type: StandardType = Field(..., description="Category type of the standard")
    tier: StandardTier = Field(..., description="Technical tier")
    process: StandardProcess = Field(..., description="Process category")
    tags: List[str] = Field(..., description="Tags for categorization")
    author: str = Field(..., description="Author or team name")
    status: StandardStatus = Field(..., description="Status of the standard")

    @field_validator('type', mode='before')
    @classmethod
    def _normalize_type(cls, value):
        return normalize_type(value)


class CreateStandardRequest(StrictModel):
    metadata: NewStandardMetadata
    content: str = Field(..., min_length=1, description="Markdown content of the standard")
    filename: Optional[str] = Field(default=None, description="Optional custom filename (without extension)")


class PartialStandardMetadata(StrictModel):
    type: Optional[StandardType] = None
    tier: Optional[StandardTier] = None
    process: Optional[StandardProcess] = None
    tags: Optional[List[str]] = None
    version: Optional[str] = Field(default=None, pattern=r'^\d+\.\d+\.\d+$')
    created: Optional[str] = None
    updated: Optional[str] = None
    author: Optional[str] = None
    status: Optional[StandardStatus] = None

    @field_validator('type', mode='before')
    @classmethod
    def _normalize_type(cls, value):
        return normalize_type(value)


class UpdateStandardRequest(StrictModel):
    path: str = Field(..., description="Path to the standard to update")
    content: Optional[str] = Field(default=None, description="New content for the standard")
    metadata: Optional[PartialStandardMetadata] = Field(default=None, description="Metadata fields to update")
    version_bump: VersionBumpName = 'patch'

    @model_validator(mode='after')
    def _content_or_metadata(self):
        if not self.content and not self.metadata:
            raise ValueError("Must provide either content or metadata to update")
        return self


class ToolResponse(BaseModel):
    """Result of a tool call: text for humans, structured data for clients"""
    content: List[Dict[str, str]]
    structured_content: Optional[Any] = None
    is_error: bool = False

    @classmethod
    def text(cls, text: str, structured_content: Any = None) -> 'ToolResponse':
        return cls(content=[{"type": "text", "text": text}], structured_content=structured_content)

    @classmethod
    def error(cls, text: str, structured_content: Any = None) -> 'ToolResponse':
        return cls(content=[{"type": "text", "text": text}],
                   structured_content=structured_content, is_error=True)


class HealthResponse(BaseModel):
    status: str
    server: str
    version: str
    indexed_standards: int
    standards_dir: str
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_status: Dict[str, int] = Field(default_factory=dict)

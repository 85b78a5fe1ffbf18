"""Controlled vocabulary for standard metadata"""

VALID_TYPES = ('principle', 'standard', 'practice', 'tech-stack', 'process')
VALID_TIERS = ('frontend', 'backend', 'database', 'infrastructure', 'security')
VALID_PROCESSES = ('development', 'testing', 'delivery', 'operations')
VALID_STATUSES = ('active', 'draft', 'deprecated')

# Legacy spellings still found in older files and client requests
PLURAL_TYPE_TO_SINGULAR = {
    'principles': 'principle',
    'standards': 'standard',
    'practices': 'practice',
    'technical-stack': 'tech-stack',
}

REQUIRED_FIELDS = (
    'type',
    'tier',
    'process',
    'tags',
    'version',
    'created',
    'updated',
    'author',
    'status',
)

INITIAL_VERSION = "1.0.0"
MARKDOWN_EXTENSION = ".md"


def normalize_type(value):
    """Map a legacy plural type name onto its canonical singular form"""
    if not isinstance(value, str):
        return value
    return PLURAL_TYPE_TO_SINGULAR.get(value.strip().lower(), value)

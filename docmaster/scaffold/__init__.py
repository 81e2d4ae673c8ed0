"""Project documentation scaffolding."""

from .index import INDEX_FILENAME, IndexEntry, ProjectIndex
from .scaffolder import (
    DEFAULT_TEMPLATE_SET,
    REFRESH_SCOPES,
    ProjectExistsError,
    ProjectNotFoundError,
    Scaffolder,
    validate_project_name,
)
from .templates import (
    TemplateSet,
    TemplateSetError,
    TemplateSetNotFoundError,
    load_template_set,
    slugify,
    substitute_placeholders,
)

__all__ = [
    "DEFAULT_TEMPLATE_SET",
    "INDEX_FILENAME",
    "IndexEntry",
    "ProjectExistsError",
    "ProjectIndex",
    "ProjectNotFoundError",
    "REFRESH_SCOPES",
    "Scaffolder",
    "TemplateSet",
    "TemplateSetError",
    "TemplateSetNotFoundError",
    "load_template_set",
    "slugify",
    "substitute_placeholders",
    "validate_project_name",
]

"""Common module — shared utilities for HRMS."""

from hrms.common.exceptions import (
    AppException,
    ConflictError,
    NotFoundException,
    UnknownEntityException,
    ValidationException,
    register_exception_handlers,
)
from hrms.common.filters import apply_filters, apply_search, apply_sorting
from hrms.common.normalizer import EnumTable, RecordMapping, humanize
from hrms.common.pagination import (
    PaginationMeta,
    PaginationParams,
    build_meta,
    paginate,
)

__all__ = [
    # Exceptions
    "AppException",
    "ConflictError",
    "NotFoundException",
    "UnknownEntityException",
    "ValidationException",
    "register_exception_handlers",
    # Filters
    "apply_filters",
    "apply_search",
    "apply_sorting",
    # Normalizer
    "EnumTable",
    "RecordMapping",
    "humanize",
    # Pagination
    "PaginationMeta",
    "PaginationParams",
    "build_meta",
    "paginate",
]

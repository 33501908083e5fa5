"""
Configuration Management Module
Runtime settings and per-category defaults.
"""
from .settings import (
    Settings,
    get_settings,
    get_loop_settings,
    get_catalog_settings,
    get_logging_settings,
    get_orchestrator_settings,
)
from .categories import (
    CategoryCatalog,
    CategoryProfile,
    DEFAULT_CATEGORY_PROFILES,
    catalog_from_payload,
    default_catalog,
    get_category_catalog,
    load_category_catalog,
    validate_loop_params,
)

__all__ = [
    "Settings",
    "get_settings",
    "get_loop_settings",
    "get_catalog_settings",
    "get_logging_settings",
    "get_orchestrator_settings",
    "CategoryCatalog",
    "CategoryProfile",
    "DEFAULT_CATEGORY_PROFILES",
    "catalog_from_payload",
    "default_catalog",
    "get_category_catalog",
    "load_category_catalog",
    "validate_loop_params",
]

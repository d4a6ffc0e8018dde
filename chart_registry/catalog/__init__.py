"""Built-in chart template catalog."""

from chart_registry.catalog.registry import SearchFilters, TemplateCatalog, get_catalog

__all__ = ["SearchFilters", "TemplateCatalog", "get_catalog"]

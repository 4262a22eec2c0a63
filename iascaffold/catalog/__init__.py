"""Template catalog loading."""

from .loader import TemplateCatalog, load_catalog, resolve_reference

__all__ = ["TemplateCatalog", "load_catalog", "resolve_reference"]

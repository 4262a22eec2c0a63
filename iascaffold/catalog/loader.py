"""Load template definitions from static YAML registration data."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Iterator

import yaml
from pydantic import ValidationError

from ..core.errors import InvalidConfigurationError
from ..core.models import TemplateDefinition
from ..settings import ScaffoldSettings, get_settings

logger = logging.getLogger(__name__)


class TemplateCatalog:
    """Ordered collection of template definitions keyed by name."""

    def __init__(self, templates: list[TemplateDefinition]) -> None:
        self._templates: dict[str, TemplateDefinition] = {}
        for template in templates:
            if template.name in self._templates:
                raise InvalidConfigurationError(
                    f"Duplicate template name: {template.name!r}"
                )
            self._templates[template.name] = template

    def __iter__(self) -> Iterator[TemplateDefinition]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)

    def get(self, name: str) -> TemplateDefinition:
        try:
            return self._templates[name]
        except KeyError:
            known = ", ".join(self._templates) or "none"
            raise KeyError(f"Unknown template {name!r} (known: {known})") from None

    def supported(self, context: Any) -> list[TemplateDefinition]:
        """Templates whose predicate accepts ``context``, in catalog order."""
        return [template for template in self if template.supports(context)]

    def generate_supported(self, context: Any, **options: Any) -> list[Path]:
        """Configure every supported template with ``options``.

        Returns:
            List of generated file paths
        """
        templates = self.supported(context)
        logger.info(f"Generating {len(templates)} template(s)")

        outputs = [template.configure(**options) for template in templates]

        logger.info(f"Successfully generated {len(outputs)} file(s)")
        return outputs


def resolve_reference(reference: str) -> Any:
    """Import an object given as ``package.module:attribute``."""
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise InvalidConfigurationError(
            f"Must be MODULE:ATTRIBUTE, got: {reference!r}"
        )
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidConfigurationError(f"Cannot import {module_name!r}: {e}") from e
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise InvalidConfigurationError(
                f"{module_name!r} has no attribute {attribute!r}"
            ) from e
    return target


def _build_definition(
    entry: Any, template_directory: Path, file_mode: int
) -> TemplateDefinition:
    if not isinstance(entry, dict):
        raise InvalidConfigurationError(f"Template entry must be a mapping, got: {entry!r}")

    required_fields = ["name", "label", "input", "output", "allow"]
    for field in required_fields:
        if field not in entry:
            raise InvalidConfigurationError(
                f"Template {entry.get('name', '?')!r} is missing required field: {field}"
            )

    allow = entry["allow"]
    if isinstance(allow, str):
        allow = [allow]
    if not isinstance(allow, list):
        raise InvalidConfigurationError(
            f"Template {entry['name']!r}: allow must be a reference or a list"
        )

    kwargs: dict[str, Any] = {
        "name": entry["name"],
        "label": entry["label"],
        "input_file": entry["input"],
        "output_file": entry["output"],
        "template_directory": template_directory,
        "allow": [resolve_reference(ref) for ref in allow],
        "file_mode": entry.get("mode", file_mode),
    }
    if "configure" in entry:
        kwargs["configure"] = resolve_reference(entry["configure"])
    if "output_directory" in entry:
        kwargs["output_directory_hint"] = Path(entry["output_directory"])

    try:
        return TemplateDefinition(**kwargs)
    except ValidationError as e:
        raise InvalidConfigurationError(
            f"Invalid template {entry['name']!r}: {e}"
        ) from e


def load_catalog(
    path: Path | None = None,
    template_directory: Path | None = None,
    settings: ScaffoldSettings | None = None,
) -> TemplateCatalog:
    """Load a template catalog from a YAML file.

    Args:
        path: Catalog file (default: settings.catalog_path)
        template_directory: Template root (default: settings.template_directory)
        settings: Settings to fall back on (default: environment settings)

    Returns:
        Catalog of template definitions
    """
    settings = settings or get_settings()
    path = Path(path) if path else settings.catalog_path
    template_directory = (
        Path(template_directory) if template_directory else settings.template_directory
    )

    if not path.exists():
        raise InvalidConfigurationError(f"Template catalog not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(f"Invalid YAML in {path}: {e}") from e

    entries = data.get("templates") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise InvalidConfigurationError(f"{path} is missing 'templates' list")

    catalog = TemplateCatalog(
        [_build_definition(entry, template_directory, settings.file_mode) for entry in entries]
    )
    logger.debug(f"Loaded {len(catalog)} template(s) from {path}")
    return catalog

"""Template rendering engine."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)
from jinja2.ext import Extension

from ..core.errors import TemplateRenderError
from .helpers import TEMPLATE_FUNCTIONS

logger = logging.getLogger(__name__)

_TAG_PATTERN = re.compile(r"<:.*?:>|<%.*?%>", re.DOTALL)
# String literals are matched first so sigils inside quotes survive.
_SIGIL_PATTERN = re.compile(
    r"('(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\")|\$(?=[A-Za-z_])"
)


def _keep_strings(match: re.Match) -> str:
    return match.group(1) or ""


class KolonSigils(Extension):
    """Accept ``$name`` variable sigils inside template tags."""

    def preprocess(self, source: str, name: str | None, filename: str | None = None) -> str:
        return _TAG_PATTERN.sub(
            lambda match: _SIGIL_PATTERN.sub(_keep_strings, match.group(0)), source
        )


def build_environment(template_directory: Path) -> Environment:
    """Create the Jinja2 environment used for paths and bodies.

    Args:
        template_directory: Top-level directory containing all templates

    Returns:
        Configured environment
    """
    env = Environment(
        loader=FileSystemLoader(str(template_directory)),
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
        variable_start_string="<:",
        variable_end_string=":>",
        block_start_string="<%",
        block_end_string="%>",
        comment_start_string="<#",
        comment_end_string="#>",
        extensions=[KolonSigils],
    )
    env.globals.update(TEMPLATE_FUNCTIONS)
    return env


class Renderer:
    """Renders template strings and template files under one root."""

    def __init__(self, template_directory: Path) -> None:
        self.template_directory = Path(template_directory)
        self.environment = build_environment(self.template_directory)

    def render_string(self, text: str, variables: dict[str, Any]) -> str:
        """Render a template given as a string."""
        try:
            return self.environment.from_string(text).render(variables)
        except TemplateError as e:
            raise TemplateRenderError(f"Error rendering {text!r}: {e}") from e

    def render_file(self, template_path: str | Path, variables: dict[str, Any]) -> str:
        """Render a template file found under the template directory.

        Args:
            template_path: Path relative to the template directory, or an
                absolute path inside it
            variables: Template variables

        Returns:
            Rendered text
        """
        name = self._template_name(Path(template_path))
        logger.debug(f"Rendering template: {name}")
        try:
            template = self.environment.get_template(name)
            return template.render(variables)
        except TemplateNotFound as e:
            raise TemplateRenderError(
                f"Template not found: {name} (in {self.template_directory})"
            ) from e
        except TemplateError as e:
            raise TemplateRenderError(f"Error rendering template {name}: {e}") from e

    def _template_name(self, template_path: Path) -> str:
        if not template_path.is_absolute():
            return template_path.as_posix()
        for root in (self.template_directory, self.template_directory.resolve()):
            try:
                return template_path.relative_to(root).as_posix()
            except ValueError:
                continue
        raise TemplateRenderError(
            f"Template {template_path} is outside {self.template_directory}"
        )

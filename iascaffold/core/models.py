"""Template definition: one recipe for generating one Instant Answer file."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from functools import cached_property
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..rendering.engine import Renderer
from ..rendering.io import write_new_text
from .errors import InvalidConfigurationError, MissingFieldError, OutputAlreadyExistsError
from .parsers import parse_file_mode
from .paths import PathSpec, infer_output_directory, resolve_path_spec
from .predicates import Predicate, normalize_allow

logger = logging.getLogger(__name__)

_DDG_PREFIX = re.compile(r"^DDG/[^/]+/")


def _no_extra_config(options: dict[str, Any]) -> dict[str, Any]:
    return {}


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


class TemplateDefinition(BaseModel):
    """A template that generates one output file of an Instant Answer."""

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        populate_by_name=True,
        ignored_types=(cached_property,),
    )

    name: str = Field(..., description="Name of the template")
    label: str = Field(..., description="Label of the template")
    input_file: PathSpec = Field(
        ..., description="Input template path, rendered or computed from the variables"
    )
    output_file: PathSpec = Field(
        ...,
        description="Output path. A string is rendered to get the final path; "
        "a callable receives the template variables and returns it.",
    )
    template_directory: Path = Field(
        ..., description="Top-level directory containing all templates"
    )
    allow: Predicate = Field(
        ..., description="Whether a particular Instant Answer is supported"
    )
    configure_fn: Callable[[dict[str, Any]], Mapping[str, Any]] = Field(
        default=_no_extra_config,
        alias="configure",
        description="Produces additional template variables from the options",
    )
    output_directory_hint: Optional[Path] = Field(
        default=None,
        description="Output directory to report when output_file is a callable",
    )
    file_mode: int = Field(default=0o644, description="File permissions (octal)")

    @field_validator("allow", mode="before")
    @classmethod
    def _normalize_allow(cls, value: Any) -> Predicate:
        return normalize_allow(value)

    @field_validator("file_mode", mode="before")
    @classmethod
    def _parse_file_mode(cls, value: Any) -> Any:
        return parse_file_mode(value)

    @cached_property
    def output_directory(self) -> Path:
        """Directory known to contain all of the generated output."""
        if callable(self.output_file):
            if self.output_directory_hint is None:
                raise InvalidConfigurationError(
                    f"Template {self.name!r} computes its output path; "
                    "an output_directory_hint is required"
                )
            return self.output_directory_hint
        return infer_output_directory(self.output_file)

    @cached_property
    def renderer(self) -> Renderer:
        return Renderer(self.template_directory)

    def supports(self, context: Any) -> bool:
        """Return True if this template applies to ``context``."""
        return bool(self.allow(context))

    def configure(self, **options: Any) -> Path:
        """Build the template variables and generate the output file.

        Args:
            **options: Must include ``ia`` (with a ``perl_module`` field) and
                ``app`` (exposing ``repository()``); passed whole to the
                extra configuration callable

        Returns:
            Path of the generated file
        """
        ia = options.get("ia")
        if ia is None:
            raise MissingFieldError("Option 'ia' is required")
        perl_module = _field(ia, "perl_module")
        if not perl_module:
            raise MissingFieldError("Instant Answer has no 'perl_module'")
        app = options.get("app")
        if app is None:
            raise MissingFieldError("Option 'app' is required")

        separated = perl_module.replace("::", "/")
        base_separated = _DDG_PREFIX.sub("", separated, count=1)

        additional = self.configure_fn(options)
        variables = {
            "ia": ia,
            "repo": app.repository(),
            "package_separated": separated,
            "package_base_separated": base_separated,
            **additional,
        }
        return self.generate(app, variables)

    def generate(self, app: Any, variables: dict[str, Any]) -> Path:
        """Create the output file from the input file.

        Args:
            app: Calling application
            variables: Template variables

        Returns:
            Path of the generated file
        """
        logger.debug(f"Generating {self.name!r} for {type(app).__name__}")

        input_file = resolve_path_spec(self.input_file, variables, self.renderer)
        output_file = resolve_path_spec(self.output_file, variables, self.renderer)
        logger.debug(f"Resolved {input_file} → {output_file}")

        if output_file.exists():
            raise OutputAlreadyExistsError(output_file)

        content = self.renderer.render_file(input_file, variables)
        write_new_text(output_file, content, mode=self.file_mode)
        logger.info(f"Rendered {input_file} → {output_file}")

        return output_file

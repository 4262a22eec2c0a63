"""Error taxonomy for template generation.

None of these derive from ``ValueError`` so that they propagate unchanged
out of pydantic validators instead of being folded into ``ValidationError``.
"""

from __future__ import annotations

from pathlib import Path


class TemplateError(Exception):
    """Base class for all template generation failures."""


class InvalidConfigurationError(TemplateError):
    """Raised when a template definition is malformed."""


class MissingFieldError(TemplateError):
    """Raised when a required option or Instant Answer field is absent."""


class TemplateRenderError(TemplateError):
    """Raised when the rendering engine cannot render a template."""


class OutputAlreadyExistsError(TemplateError):
    """Raised when the target output file is already present."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Template output file {self.path} already exists")


class WriteError(TemplateError):
    """Raised when the rendered output cannot be written."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(
            f"Error creating output file '{self.path}' from template: {cause}"
        )

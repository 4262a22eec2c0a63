"""iascaffold - Template-driven file generation for Instant Answers.

Each template definition renders one input template to one output file,
with templated input/output paths and a guard against overwriting.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .catalog import TemplateCatalog, load_catalog
from .core.errors import (
    InvalidConfigurationError,
    MissingFieldError,
    OutputAlreadyExistsError,
    TemplateError,
    TemplateRenderError,
    WriteError,
)
from .core.models import TemplateDefinition
from .rendering.engine import Renderer
from .rendering.helpers import indent

__all__ = [
    "InvalidConfigurationError",
    "MissingFieldError",
    "OutputAlreadyExistsError",
    "Renderer",
    "TemplateCatalog",
    "TemplateDefinition",
    "TemplateError",
    "TemplateRenderError",
    "WriteError",
    "indent",
    "load_catalog",
]

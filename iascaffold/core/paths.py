"""Input/output path specs and output directory inference."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:
    from ..rendering.engine import Renderer

# Opening delimiter of the template syntax.
TEMPLATE_OPEN = "<:"

PathSpec = Union[str, Callable[[dict[str, Any]], Union[str, Path]]]


def resolve_path_spec(spec: PathSpec, variables: dict[str, Any], renderer: Renderer) -> Path:
    """Resolve a path spec to a concrete path.

    Args:
        spec: Template string, or callable receiving the variables
        variables: Template variables
        renderer: Renderer used for string specs

    Returns:
        Resolved path
    """
    if callable(spec):
        return Path(spec(variables))
    return Path(renderer.render_string(spec, variables))


def infer_output_directory(pattern: str | Path) -> Path:
    """Return the closest ancestor of ``pattern`` free of template syntax.

    Args:
        pattern: Unrendered output path pattern

    Returns:
        Directory known to contain the rendered output
    """
    out_dir = Path(pattern).parent
    while TEMPLATE_OPEN in str(out_dir):
        out_dir = out_dir.parent
    return out_dir

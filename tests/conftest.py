"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest


class FakeApp:
    """Stand-in for the calling application."""

    def __init__(self, repo: str = "goodies") -> None:
        self.repo = repo

    def repository(self) -> str:
        return self.repo


@pytest.fixture
def app() -> FakeApp:
    return FakeApp()


@pytest.fixture
def ia() -> dict:
    return {"id": "example", "name": "Example", "perl_module": "DDG::Goodie::Example"}


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Return a template root holding a few small templates."""
    root = tmp_path / "templates"
    (root / "lib").mkdir(parents=True)
    (root / "tmpl.txt").write_text("Hello <: $name :>", encoding="utf-8")
    (root / "lib" / "Module.pm").write_text(
        "package <: $ia.perl_module :>;\n# <: $package_base_separated :>\n",
        encoding="utf-8",
    )
    (root / "vars.txt").write_text(
        "<: $package_separated :>|<: $package_base_separated :>|<: $repo :>",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"

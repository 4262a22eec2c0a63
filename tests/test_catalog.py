"""
Tests for loading template catalogs from YAML.
"""

import sys
import textwrap
from pathlib import Path

import pytest

from iascaffold.catalog import TemplateCatalog, load_catalog, resolve_reference
from iascaffold.core.errors import InvalidConfigurationError
from iascaffold.core.predicates import AnyOf
from iascaffold.settings import ScaffoldSettings

HOOKS = '''
def is_goodie(ctx):
    return ctx.get("repo") == "goodies"


def is_spice(ctx):
    return ctx.get("repo") == "spice"


def extra(options):
    return {"package_base_separated": options["ia"]["id"]}


class Nested:
    @staticmethod
    def always(ctx):
        return True
'''


@pytest.fixture
def hooks(tmp_path: Path, monkeypatch) -> str:
    """Make an importable module of predicates and configure hooks."""
    hooks_dir = tmp_path / "hooks"
    hooks_dir.mkdir()
    (hooks_dir / "catalog_hooks.py").write_text(HOOKS, encoding="utf-8")
    monkeypatch.syspath_prepend(str(hooks_dir))
    monkeypatch.delitem(sys.modules, "catalog_hooks", raising=False)
    return "catalog_hooks"


def write_catalog(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "templates.yml"
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


@pytest.fixture
def catalog_file(tmp_path: Path, out_dir: Path, hooks: str) -> Path:
    return write_catalog(
        tmp_path,
        f"""
        templates:
          - name: module
            label: Perl module
            input: lib/Module.pm
            output: "{out_dir.as_posix()}/lib/<: $package_separated :>.pm"
            allow: ["{hooks}:is_goodie", "{hooks}:is_spice"]
          - name: vars
            label: Variables
            input: vars.txt
            output: "{out_dir.as_posix()}/vars/<: $package_base_separated :>.txt"
            allow: "{hooks}:is_goodie"
            configure: "{hooks}:extra"
            mode: 0600
        """,
    )


class TestLoadCatalog:
    def test_loads_definitions_in_order(self, catalog_file, template_dir, out_dir):
        catalog = load_catalog(catalog_file, template_dir)

        assert len(catalog) == 2
        assert [t.name for t in catalog] == ["module", "vars"]
        module = catalog.get("module")
        assert module.label == "Perl module"
        assert module.template_directory == template_dir
        assert isinstance(module.allow, AnyOf)
        assert module.output_directory == out_dir / "lib"
        assert catalog.get("vars").file_mode == 0o600

    def test_supported_filters_by_predicate(self, catalog_file, template_dir):
        catalog = load_catalog(catalog_file, template_dir)
        assert [t.name for t in catalog.supported({"repo": "goodies"})] == ["module", "vars"]
        assert [t.name for t in catalog.supported({"repo": "spice"})] == ["module"]
        assert catalog.supported({"repo": "longtail"}) == []

    def test_generate_supported(self, catalog_file, template_dir, out_dir, ia, app):
        catalog = load_catalog(catalog_file, template_dir)
        outputs = catalog.generate_supported({"repo": "goodies"}, ia=ia, app=app)

        assert outputs == [
            out_dir / "lib" / "DDG" / "Goodie" / "Example.pm",
            out_dir / "vars" / "example.txt",
        ]
        assert outputs[0].read_text(encoding="utf-8").startswith(
            "package DDG::Goodie::Example;"
        )
        assert outputs[1].read_text(encoding="utf-8") == "DDG/Goodie/Example|example|goodies"

    def test_unknown_template(self, catalog_file, template_dir):
        catalog = load_catalog(catalog_file, template_dir)
        with pytest.raises(KeyError, match="module, vars"):
            catalog.get("nope")

    def test_settings_fallback(self, catalog_file, template_dir):
        settings = ScaffoldSettings(
            template_directory=template_dir, catalog_path=catalog_file, file_mode=0o640
        )
        catalog = load_catalog(settings=settings)
        assert catalog.get("module").template_directory == template_dir
        assert catalog.get("module").file_mode == 0o640

    def test_output_directory_hint(self, tmp_path, template_dir, hooks):
        path = write_catalog(
            tmp_path,
            f"""
            templates:
              - name: hinted
                label: Hinted
                input: tmpl.txt
                output: "<: $name :>/x.txt"
                output_directory: share
                allow: "{hooks}:Nested.always"
            """,
        )
        template = load_catalog(path, template_dir).get("hinted")
        assert template.output_directory_hint == Path("share")
        assert template.supports({}) is True


class TestCatalogErrors:
    def test_missing_file(self, tmp_path, template_dir):
        with pytest.raises(InvalidConfigurationError, match="not found"):
            load_catalog(tmp_path / "missing.yml", template_dir)

    def test_invalid_yaml(self, tmp_path, template_dir):
        path = write_catalog(tmp_path, "templates: [unclosed\n")
        with pytest.raises(InvalidConfigurationError, match="Invalid YAML"):
            load_catalog(path, template_dir)

    def test_missing_templates_list(self, tmp_path, template_dir):
        path = write_catalog(tmp_path, "other: 1\n")
        with pytest.raises(InvalidConfigurationError, match="'templates'"):
            load_catalog(path, template_dir)

    def test_missing_field(self, tmp_path, template_dir, hooks):
        path = write_catalog(
            tmp_path,
            f"""
            templates:
              - name: partial
                label: Partial
                input: tmpl.txt
                allow: "{hooks}:is_goodie"
            """,
        )
        with pytest.raises(InvalidConfigurationError, match="output"):
            load_catalog(path, template_dir)

    def test_duplicate_names(self, tmp_path, template_dir, hooks):
        entry = f"""
              - name: same
                label: Same
                input: tmpl.txt
                output: out.txt
                allow: '{hooks}:is_goodie'"""
        path = write_catalog(tmp_path, "\n            templates:" + entry + entry + "\n")
        with pytest.raises(InvalidConfigurationError, match="Duplicate"):
            load_catalog(path, template_dir)

    def test_non_callable_reference(self, tmp_path, template_dir):
        path = write_catalog(
            tmp_path,
            """
            templates:
              - name: bad
                label: Bad
                input: tmpl.txt
                output: out.txt
                allow: "os:sep"
            """,
        )
        with pytest.raises(InvalidConfigurationError, match="predicate"):
            load_catalog(path, template_dir)

    def test_empty_catalog(self, tmp_path, template_dir):
        path = write_catalog(tmp_path, "templates: []\n")
        assert len(load_catalog(path, template_dir)) == 0

    def test_duplicates_rejected_directly(self, template_dir):
        from iascaffold.core.models import TemplateDefinition

        template = TemplateDefinition(
            name="x",
            label="X",
            input_file="tmpl.txt",
            output_file="out.txt",
            template_directory=template_dir,
            allow=[],
        )
        with pytest.raises(InvalidConfigurationError):
            TemplateCatalog([template, template])


class TestResolveReference:
    def test_resolves_attribute(self):
        assert resolve_reference("os.path:join").__name__ == "join"

    @pytest.mark.parametrize("reference", ["os.path", ":join", "os.path:"])
    def test_malformed(self, reference):
        with pytest.raises(InvalidConfigurationError, match="MODULE:ATTRIBUTE"):
            resolve_reference(reference)

    def test_unknown_module(self):
        with pytest.raises(InvalidConfigurationError, match="Cannot import"):
            resolve_reference("no_such_module_here:thing")

    def test_unknown_attribute(self):
        with pytest.raises(InvalidConfigurationError, match="no attribute"):
            resolve_reference("os.path:no_such_function")


class TestCatalogModes:
    def _catalog(self, tmp_path, hooks, mode):
        return write_catalog(
            tmp_path,
            f"""
            templates:
              - name: moded
                label: Moded
                input: tmpl.txt
                output: out.txt
                allow: "{hooks}:is_goodie"
                mode: {mode}
            """,
        )

    @pytest.mark.parametrize("mode", ['"0640"', "'640'", "0640"])
    def test_quoted_and_yaml_octal_modes(self, tmp_path, template_dir, hooks, mode):
        path = self._catalog(tmp_path, hooks, mode)
        assert load_catalog(path, template_dir).get("moded").file_mode == 0o640

    def test_decimal_looking_mode_rejected(self, tmp_path, template_dir, hooks):
        path = self._catalog(tmp_path, hooks, "644")
        with pytest.raises(InvalidConfigurationError, match="quote octal modes"):
            load_catalog(path, template_dir)

"""
Tests for the AST-based signature source.

Covers parameter extraction, export detection, module naming, broken
files, and reverse call counts.
"""
import ast
from pathlib import Path

import pytest

from argwatch.errors import UnknownFunctionError
from argwatch.models import ParameterDecl
from argwatch.sources.python_ast import (
    PythonASTSource,
    extract_parameters,
    literal_exports,
)


def params_of(source: str, drop_receiver: bool = False) -> list[ParameterDecl]:
    """Helper: parameters of the first function in source."""
    node = ast.parse(source).body[0]
    return extract_parameters(node, drop_receiver=drop_receiver)


def make_package(root: Path, files: dict[str, str]) -> Path:
    """Helper: write a package tree and return its directory."""
    for relpath, content in files.items():
        path = root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


class TestExtractParameters:
    """Tests for extract_parameters()."""

    def test_no_parameters(self):
        assert params_of("def f(): pass") == []

    def test_mandatory_parameter(self):
        assert params_of("def f(x): pass") == [ParameterDecl("x")]

    def test_literal_default_text(self):
        """Defaults are kept as source text."""
        params = params_of("def f(x=1, y='a', z=os.sep): pass")

        assert [p.default_repr for p in params] == ["1", "'a'", "os.sep"]
        assert all(p.has_default for p in params)

    def test_none_default_is_null_marker(self):
        """A None default is recorded as an explicit null."""
        (param,) = params_of("def f(out=None): pass")

        assert param.has_default is True
        assert param.default_repr is None

    def test_defaults_align_to_trailing_parameters(self):
        params = params_of("def f(a, b, c=3): pass")

        assert [p.has_default for p in params] == [False, False, True]
        assert params[2].default_repr == "3"

    def test_full_declaration_order(self):
        """posonly, regular, *args, kwonly, **kwargs."""
        params = params_of("def f(a, /, b=2, *args, c, d=4, **kwargs): pass")

        assert [p.name for p in params] == ["a", "b", "*args", "c", "d", "**kwargs"]
        assert params[3].has_default is False
        assert params[4].default_repr == "4"

    def test_positional_only_defaults(self):
        params = params_of("def f(a=1, /, b=2): pass")
        assert [p.default_repr for p in params] == ["1", "2"]

    def test_expression_default(self):
        """Expressions are compared as text, not evaluated."""
        (param,) = params_of("def f(x=1 + 1): pass")
        assert param.default_repr == "1 + 1"

    def test_async_function(self):
        assert params_of("async def f(x=True): pass") == [ParameterDecl("x", True, "True")]

    def test_drop_receiver(self):
        params = params_of("def m(self, x=1): pass", drop_receiver=True)
        assert [p.name for p in params] == ["x"]

    def test_drop_receiver_by_position(self):
        """The receiver is dropped whatever it is called."""
        params = params_of("def create(klass, size=1): pass", drop_receiver=True)
        assert [p.name for p in params] == ["size"]

    def test_drop_receiver_without_positional(self):
        params = params_of("def m(*args, flag=False): pass", drop_receiver=True)
        assert [p.name for p in params] == ["*args", "flag"]


class TestLiteralExports:
    """Tests for literal_exports()."""

    def test_missing(self):
        assert literal_exports(ast.parse("x = 1")) is None

    def test_list(self):
        tree = ast.parse("__all__ = ['a', 'b']")
        assert literal_exports(tree) == frozenset({"a", "b"})

    def test_annotated_and_extended(self):
        tree = ast.parse("__all__: list[str] = ('a',)\n__all__ += ['b']")
        assert literal_exports(tree) == frozenset({"a", "b"})

    def test_non_literal_ignored(self):
        tree = ast.parse("__all__ = [name for name in dir()]")
        assert literal_exports(tree) is None


class TestPythonASTSource:
    """Tests for PythonASTSource catalogs."""

    def test_lists_module_functions_in_order(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "def top(): pass\n",
            "b.py": "def second(): pass\ndef first_in_b(): pass\n",
            "a.py": "def in_a(): pass\n",
        })
        refs = PythonASTSource().list_functions(pkg)

        assert [r.id for r in refs] == [
            "mypkg.top",
            "mypkg.a.in_a",
            "mypkg.b.second",
            "mypkg.b.first_in_b",
        ]

    def test_skips_nested_functions_and_methods(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "",
            "mod.py": (
                "def outer():\n"
                "    def inner(): pass\n"
                "class Thing:\n"
                "    def method(self): pass\n"
            ),
        })
        refs = PythonASTSource().list_functions(pkg)
        assert [r.id for r in refs] == ["mypkg.mod.outer"]

    def test_include_methods(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "",
            "mod.py": (
                "class Thing:\n"
                "    def __init__(self, size=1): pass\n"
                "    def _hidden(self): pass\n"
                "    @staticmethod\n"
                "    def build(size=2): pass\n"
                "    @classmethod\n"
                "    def create(cls, size=3): pass\n"
            ),
        })
        source = PythonASTSource(include_methods=True)
        refs = {r.id: r for r in source.list_functions(pkg)}

        assert set(refs) == {
            "mypkg.mod.Thing.__init__",
            "mypkg.mod.Thing._hidden",
            "mypkg.mod.Thing.build",
            "mypkg.mod.Thing.create",
        }
        assert refs["mypkg.mod.Thing.__init__"].exported is True
        assert refs["mypkg.mod.Thing._hidden"].exported is False
        assert [p.name for p in source.get_parameters("mypkg.mod.Thing.__init__")] == ["size"]
        assert [p.name for p in source.get_parameters("mypkg.mod.Thing.build")] == ["size"]
        assert [p.name for p in source.get_parameters("mypkg.mod.Thing.create")] == ["size"]

    def test_unconventional_receiver_names(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": (
                "class Meta(type):\n"
                "    def __call__(mcs, size=1): pass\n"
                "class Thing:\n"
                "    @classmethod\n"
                "    def create(klass, size=2): pass\n"
                "    def grow(this, size=3):\n"
                "        this.shrink()\n"
                "    def shrink(this): pass\n"
            ),
        })
        source = PythonASTSource(include_methods=True)
        source.list_functions(pkg)

        for method in ("Meta.__call__", "Thing.create", "Thing.grow"):
            assert [p.name for p in source.get_parameters(f"mypkg.{method}")] == ["size"]
        assert source.get_parameters("mypkg.Thing.shrink") == []
        assert source.call_graph.n_callers("mypkg.Thing.shrink") == 1

    def test_exported_by_naming(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "",
            "api.py": "def public(): pass\ndef _helper(): pass\n",
            "_internal.py": "def looks_public(): pass\n",
        })
        refs = {r.id: r.exported for r in PythonASTSource().list_functions(pkg)}

        assert refs["mypkg.api.public"] is True
        assert refs["mypkg.api._helper"] is False
        assert refs["mypkg._internal.looks_public"] is False

    def test_exported_by_dunder_all(self, tmp_path):
        """__all__ overrides the naming convention."""
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "",
            "api.py": (
                "__all__ = ['listed']\n"
                "def listed(): pass\n"
                "def unlisted(): pass\n"
            ),
        })
        refs = {r.id: r.exported for r in PythonASTSource().list_functions(pkg)}

        assert refs == {"mypkg.api.listed": True, "mypkg.api.unlisted": False}

    def test_reexported_by_package_all(self, tmp_path):
        """A private-module function listed in the package __all__ is exported."""
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "from ._impl import run, helper\n__all__ = ['run']\n",
            "_impl.py": "def run(): pass\ndef helper(): pass\n",
        })
        refs = {r.id: r.exported for r in PythonASTSource().list_functions(pkg)}

        assert refs == {"mypkg._impl.run": True, "mypkg._impl.helper": False}

    def test_reexported_by_public_import(self, tmp_path):
        """Without __all__, a public name imported into the package is exported."""
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "from ._impl import run\nfrom ._impl import helper as _helper\n",
            "_impl.py": "def run(): pass\ndef helper(): pass\n",
        })
        refs = PythonASTSource().list_functions(pkg, exported_only=True)

        assert [r.id for r in refs] == ["mypkg._impl.run"]

    def test_exported_only(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "def run(): pass\ndef _setup(): pass\n",
        })
        refs = PythonASTSource().list_functions(pkg, exported_only=True)
        assert [r.id for r in refs] == ["mypkg.run"]

    def test_src_layout_root(self, tmp_path):
        """A project root with src/ strips the prefix from module names."""
        root = make_package(tmp_path / "project", {
            "src/mypkg/__init__.py": "",
            "src/mypkg/core.py": "def go(): pass\n",
        })
        refs = PythonASTSource().list_functions(root)
        assert [r.id for r in refs] == ["mypkg.core.go"]

    def test_project_root_skips_non_package_files(self, tmp_path):
        """Tests, docs and top-level scripts of a project are not catalogued."""
        root = make_package(tmp_path / "project", {
            "setup.py": "def helper(verbose=True): pass\n",
            "docs/conf.py": "def setup(app): pass\n",
            "tests/__init__.py": "",
            "tests/test_core.py": "def test_load(verbose=None): pass\n",
            "src/mypkg/__init__.py": "",
            "src/mypkg/core.py": "def load(verbose=False): pass\n",
        })
        refs = PythonASTSource().list_functions(root)
        assert [r.id for r in refs] == ["mypkg.core.load"]

    def test_project_root_with_flat_packages(self, tmp_path):
        root = make_package(tmp_path / "project", {
            "setup.py": "def helper(): pass\n",
            "beta/__init__.py": "def b(): pass\n",
            "alpha/__init__.py": "def a(): pass\n",
        })
        refs = PythonASTSource().list_functions(root)
        assert [r.id for r in refs] == ["alpha.a", "beta.b"]

    def test_directory_without_packages_scanned_flat(self, tmp_path):
        root = make_package(tmp_path / "scripts", {
            "tool.py": "def run(): pass\n",
            "more/extra.py": "def go(): pass\n",
        })
        refs = PythonASTSource().list_functions(root)
        assert [r.id for r in refs] == ["more.extra.go", "tool.run"]

    def test_current_directory_scope(self, tmp_path, monkeypatch):
        """Scanning "." from inside a package uses the package's real name."""
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "from .core import go\ndef top(): pass\n",
            "core.py": "def go(): pass\n",
        })
        monkeypatch.chdir(pkg)

        source = PythonASTSource()
        refs = source.list_functions(".")

        assert [r.id for r in refs] == ["mypkg.top", "mypkg.core.go"]
        assert source.modules[0].name == "mypkg"

    def test_ignored_directories(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "",
            "core.py": "def keep(): pass\n",
            "__pycache__/junk.py": "def drop(): pass\n",
            ".venv/lib/site.py": "def drop_too(): pass\n",
        })
        refs = PythonASTSource().list_functions(pkg)
        assert [r.id for r in refs] == ["mypkg.core.keep"]

    def test_syntax_error_file_skipped(self, tmp_path, caplog):
        """A broken module is logged and skipped."""
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "",
            "broken.py": "def oops(:\n",
            "fine.py": "def ok(): pass\n",
        })
        refs = PythonASTSource().list_functions(pkg)

        assert [r.id for r in refs] == ["mypkg.fine.ok"]
        assert "Syntax error" in caplog.text

    def test_latin1_file(self, tmp_path):
        """Undecodable UTF-8 falls back to latin-1."""
        pkg = tmp_path / "mypkg"
        pkg.mkdir()
        (pkg / "__init__.py").write_text("")
        (pkg / "legacy.py").write_bytes(b"def greet(name='caf\xe9'): pass\n")

        source = PythonASTSource()
        source.list_functions(pkg)
        (param,) = source.get_parameters("mypkg.legacy.greet")

        assert param.default_repr == "'café'"

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PythonASTSource().list_functions(tmp_path / "nope")

    def test_file_scope_raises(self, tmp_path):
        target = tmp_path / "mod.py"
        target.write_text("def f(): pass\n")

        with pytest.raises(NotADirectoryError):
            PythonASTSource().list_functions(target)

    def test_unknown_function_raises(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {"__init__.py": "def f(): pass\n"})
        source = PythonASTSource()
        source.list_functions(pkg)

        with pytest.raises(UnknownFunctionError):
            source.get_parameters("mypkg.g")

    def test_redefinition_keeps_last_signature(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "def f(x=1): pass\ndef f(x=2): pass\n",
        })
        source = PythonASTSource()
        refs = source.list_functions(pkg)

        assert [r.id for r in refs] == ["mypkg.f"]
        assert source.get_parameters("mypkg.f")[0].default_repr == "2"


class TestCallResolution:
    """Tests for reverse call counts from the AST source."""

    @pytest.fixture
    def source(self, tmp_path):
        pkg = make_package(tmp_path / "mypkg", {
            "__init__.py": "from .util import helper\n",
            "util.py": (
                "def helper(): pass\n"
                "def other():\n"
                "    helper()\n"
                "    other()\n"
            ),
            "api.py": (
                "from mypkg.util import helper as h\n"
                "from . import util\n"
                "import mypkg.util\n"
                "def one():\n"
                "    h()\n"
                "def two():\n"
                "    util.helper()\n"
                "    util.other()\n"
                "def three():\n"
                "    mypkg.util.helper()\n"
                "    one()\n"
            ),
        })
        source = PythonASTSource()
        source.list_functions(pkg)
        return source

    def test_n_callers(self, source):
        """Callers are counted once each, across import styles."""
        graph = source.call_graph

        assert graph.n_callers("mypkg.util.helper") == 4
        assert graph.n_callers("mypkg.api.one") == 1
        assert graph.n_callers("mypkg.api.three") == 0
        assert graph.edge_count == 6

    def test_self_calls_ignored(self, source):
        assert source.call_graph.n_callers("mypkg.util.other") == 1

    def test_refs_carry_caller_counts(self, tmp_path):
        pkg = make_package(tmp_path / "pkg2", {
            "__init__.py": "def a(): pass\ndef b():\n    a()\n",
        })
        refs = {r.id: r.n_callers for r in PythonASTSource().list_functions(pkg)}
        assert refs == {"pkg2.a": 1, "pkg2.b": 0}

    def test_method_self_calls(self, tmp_path):
        pkg = make_package(tmp_path / "pkg3", {
            "__init__.py": (
                "class C:\n"
                "    def a(self): pass\n"
                "    def b(self):\n"
                "        self.a()\n"
            ),
        })
        source = PythonASTSource(include_methods=True)
        source.list_functions(pkg)

        assert source.call_graph.n_callers("pkg3.C.a") == 1

"""
Signature source backed by static analysis of a package directory.

Parses every Python module under the scanned root with the `ast` module,
so nothing is imported or executed:
- Module-level functions are listed in file order, then source order
- Methods are listed only when requested, without their receiver
- `__all__` decides what is exported when a module defines it literally,
  and a package `__init__` re-exporting a function makes it exported
- Calls between listed functions feed a reverse call graph
"""
import ast
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterator, Optional

from argwatch.call_graph import CallGraph
from argwatch.constants import (
    EXPORTS_ATTRIBUTE,
    KWARG_PREFIX,
    VARARG_PREFIX,
)
from argwatch.errors import UnknownFunctionError
from argwatch.models import FunctionRef, ParameterDecl
from argwatch.readers import read_source
from argwatch.scanner import find_package_dirs, iter_python_files, module_name_for
from argwatch.sources.base import is_exported, is_public_method

logger = logging.getLogger(__name__)

__all__ = [
    "PythonASTSource",
    "ParsedModule",
    "extract_parameters",
    "literal_exports",
    "parse_module",
]

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


@dataclass(frozen=True)
class ParsedModule:
    """A successfully parsed module of the scanned package."""
    name: str
    path: Path
    tree: ast.Module
    is_package: bool = False

    @property
    def parts(self) -> tuple[str, ...]:
        return tuple(self.name.split(".")) if self.name else ()


@dataclass(frozen=True)
class _FunctionRecord:
    """Where a listed function lives and how to read its signature."""
    module: ParsedModule
    node: FunctionNode
    exported: bool
    class_name: Optional[str] = None
    drops_receiver: bool = False

    @property
    def receiver(self) -> Optional[str]:
        """Name bound to the instance or class inside a method body."""
        if not self.drops_receiver:
            return None
        positional = self.node.args.posonlyargs + self.node.args.args
        return positional[0].arg if positional else None


@dataclass
class _ImportBindings:
    """Names a module binds to package functions and modules through imports."""
    functions: dict[str, str] = field(default_factory=dict)
    modules: dict[str, str] = field(default_factory=dict)


def _unparse_safe(node: ast.expr) -> str:
    """Safely convert AST node back to source code."""
    try:
        return ast.unparse(node)
    except Exception as e:
        logger.debug("Failed to unparse AST node %s: %s", type(node).__name__, e)
        return "..."


def _make_parameter(name: str, default: Optional[ast.expr]) -> ParameterDecl:
    if default is None:
        return ParameterDecl(name)
    if isinstance(default, ast.Constant) and default.value is None:
        return ParameterDecl(name, has_default=True, default_repr=None)
    return ParameterDecl(name, has_default=True, default_repr=_unparse_safe(default))


def extract_parameters(node: FunctionNode, drop_receiver: bool = False) -> list[ParameterDecl]:
    """
    Extract a function's parameters in declaration order.

    Order is positional-only, positional-or-keyword, `*args`,
    keyword-only, `**kwargs`. Variadic parameters keep their star prefix
    and never have a default.

    Args:
        node: Function definition
        drop_receiver: Drop the first positional parameter, whatever its
                       name (the receiver of instance and class methods)

    Returns:
        List of ParameterDecl
    """
    args = node.args
    positional = args.posonlyargs + args.args
    first_default_idx = len(positional) - len(args.defaults)

    params = []
    for i, arg in enumerate(positional):
        default = args.defaults[i - first_default_idx] if i >= first_default_idx else None
        params.append(_make_parameter(arg.arg, default))

    if drop_receiver and positional:
        params = params[1:]

    if args.vararg:
        params.append(ParameterDecl(f"{VARARG_PREFIX}{args.vararg.arg}"))

    # kw_defaults holds None for keyword-only parameters without a default
    for arg, default in zip(args.kwonlyargs, args.kw_defaults):
        params.append(_make_parameter(arg.arg, default))

    if args.kwarg:
        params.append(ParameterDecl(f"{KWARG_PREFIX}{args.kwarg.arg}"))

    return params


def literal_exports(tree: ast.Module) -> Optional[frozenset[str]]:
    """
    Read a module's `__all__` when it is built from string literals.

    Handles plain and annotated assignment and `+=` extension.

    Returns:
        The exported names, or None if `__all__` is missing or not literal
    """
    names: Optional[set[str]] = None

    for stmt in tree.body:
        if isinstance(stmt, ast.Assign):
            if not any(isinstance(t, ast.Name) and t.id == EXPORTS_ATTRIBUTE for t in stmt.targets):
                continue
            extend = False
        elif isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
            if not (isinstance(stmt.target, ast.Name) and stmt.target.id == EXPORTS_ATTRIBUTE):
                continue
            extend = False
        elif isinstance(stmt, ast.AugAssign) and isinstance(stmt.op, ast.Add):
            if not (isinstance(stmt.target, ast.Name) and stmt.target.id == EXPORTS_ATTRIBUTE):
                continue
            extend = True
        else:
            continue

        try:
            values = ast.literal_eval(stmt.value)
        except (ValueError, TypeError, SyntaxError):
            logger.debug("Non-literal %s at line %s, ignoring it", EXPORTS_ATTRIBUTE, stmt.lineno)
            return None

        if not isinstance(values, (list, tuple)) or not all(isinstance(v, str) for v in values):
            logger.debug("%s at line %s is not a sequence of strings", EXPORTS_ATTRIBUTE, stmt.lineno)
            return None

        if extend and names is not None:
            names.update(values)
        else:
            names = set(values)

    return frozenset(names) if names is not None else None


def parse_module(filepath: Path, root: Path) -> Optional[ParsedModule]:
    """
    Read and parse one module.

    Returns:
        ParsedModule, or None if the file is unreadable or has a syntax error
    """
    source = read_source(filepath)
    if source is None:
        return None

    try:
        tree = ast.parse(source, filename=str(filepath))
    except SyntaxError as e:
        logger.warning(
            "Syntax error in %s at line %s: %s",
            filepath, e.lineno, e.msg
        )
        return None
    except ValueError as e:
        # Null bytes on interpreters that report them as ValueError
        logger.warning("Cannot parse %s: %s", filepath, e)
        return None

    return ParsedModule(
        name=module_name_for(filepath, root),
        path=filepath,
        tree=tree,
        is_package=filepath.stem == "__init__",
    )


class PythonASTSource:
    """
    List and describe the functions of a package directory via AST.

    Usage:
        source = PythonASTSource()
        refs = source.list_functions("path/to/mypkg")
        params = source.get_parameters(refs[0].id)

    The source keeps the catalog of the last `list_functions` call;
    `get_parameters` only answers for functions from that catalog.
    """

    def __init__(
        self,
        include_methods: bool = False,
        ignore_dirs: Optional[frozenset[str]] = None,
    ):
        self.include_methods = include_methods
        self.ignore_dirs = ignore_dirs
        self.modules: list[ParsedModule] = []
        self.call_graph = CallGraph()
        self._records: dict[str, _FunctionRecord] = {}

    def list_functions(self, scope: str | Path, exported_only: bool = False) -> list[FunctionRef]:
        """
        Scan a package directory and list its functions.

        A project root is narrowed to its top-level packages; a directory
        without any package is scanned as a flat set of modules.

        Args:
            scope: Package directory (or a project root containing it)
            exported_only: Only list exported functions

        Returns:
            FunctionRef list in file order, then source order

        Raises:
            FileNotFoundError: If scope doesn't exist
            NotADirectoryError: If scope is not a directory
        """
        root = Path(scope).resolve()
        self.modules = []
        self._records = {}

        scan_dirs = find_package_dirs(root, ignore_dirs=self.ignore_dirs) or [root]
        for scan_dir in scan_dirs:
            for filepath in iter_python_files(scan_dir, ignore_dirs=self.ignore_dirs):
                module = parse_module(filepath, scan_dir)
                if module is not None:
                    self.modules.append(module)
                    self._collect_functions(module)

        module_names = {m.name for m in self.modules}
        bindings = {m.name: self._import_bindings(m, module_names) for m in self.modules}

        self._mark_reexports(bindings)
        self.call_graph = self._build_call_graph(bindings, module_names)

        logger.debug(
            "Parsed %d modules under %s: %d functions, %d resolved calls",
            len(self.modules), root, self.call_graph.node_count, self.call_graph.edge_count
        )

        return [
            FunctionRef(
                id=function_id,
                exported=record.exported,
                n_callers=self.call_graph.n_callers(function_id),
            )
            for function_id, record in self._records.items()
            if record.exported or not exported_only
        ]

    def get_parameters(self, function_id: str) -> list[ParameterDecl]:
        """
        Get the parameters of a listed function.

        Raises:
            UnknownFunctionError: If the function was not listed
        """
        record = self._records.get(function_id)
        if record is None:
            raise UnknownFunctionError(f"Unknown function: {function_id}")
        return extract_parameters(record.node, drop_receiver=record.drops_receiver)

    # -------------------------------------------------------------------------
    # Function Collection
    # -------------------------------------------------------------------------

    def _collect_functions(self, module: ParsedModule) -> None:
        """Record module-level functions, and methods if enabled."""
        exports = literal_exports(module.tree)

        for stmt in module.tree.body:
            if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                self._add_record(
                    f"{module.name}.{stmt.name}",
                    _FunctionRecord(
                        module=module,
                        node=stmt,
                        exported=is_exported(stmt.name, module.parts, exports),
                    ),
                )

            elif isinstance(stmt, ast.ClassDef) and self.include_methods:
                class_exported = is_exported(stmt.name, module.parts, exports)
                for child in stmt.body:
                    if not isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef)):
                        continue
                    self._add_record(
                        f"{module.name}.{stmt.name}.{child.name}",
                        _FunctionRecord(
                            module=module,
                            node=child,
                            exported=class_exported and is_public_method(child.name),
                            class_name=stmt.name,
                            drops_receiver=not _is_staticmethod(child),
                        ),
                    )

    def _add_record(self, function_id: str, record: _FunctionRecord) -> None:
        if function_id in self._records:
            # Later definitions win at runtime; keep the first position
            logger.debug("Function %s redefined at line %s", function_id, record.node.lineno)
        self._records[function_id] = record

    def _mark_reexports(self, bindings: dict[str, _ImportBindings]) -> None:
        """Mark functions that a package `__init__` exposes under a public name."""
        for module in self.modules:
            if not module.is_package:
                continue
            exports = literal_exports(module.tree)

            for local, target in bindings[module.name].functions.items():
                record = self._records[target]
                if record.exported or not is_exported(local, module.parts, exports):
                    continue
                logger.debug("%s re-exported by %s as %s", target, module.name, local)
                self._records[target] = replace(record, exported=True)

    # -------------------------------------------------------------------------
    # Call Resolution
    # -------------------------------------------------------------------------

    def _build_call_graph(
        self,
        bindings: dict[str, _ImportBindings],
        module_names: set[str],
    ) -> CallGraph:
        """Resolve calls between listed functions."""
        graph = CallGraph(self._records)

        for caller_id, record in self._records.items():
            module_bindings = bindings[record.module.name]
            for callee_id in self._iter_callees(record, module_bindings, module_names):
                graph.add_call(caller_id, callee_id)

        return graph

    def _import_bindings(self, module: ParsedModule, module_names: set[str]) -> _ImportBindings:
        """Collect names bound to package functions or modules by imports."""
        bindings = _ImportBindings()

        for node in ast.walk(module.tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.asname:
                        bindings.modules[alias.asname] = alias.name
                    else:
                        # `import a.b` binds `a`; attribute chains are resolved later
                        top = alias.name.split(".")[0]
                        bindings.modules[top] = top

            elif isinstance(node, ast.ImportFrom):
                base = _resolve_import_base(module, node)
                if base is None:
                    continue
                for alias in node.names:
                    local = alias.asname or alias.name
                    target = f"{base}.{alias.name}"
                    if target in self._records:
                        bindings.functions[local] = target
                    elif target in module_names:
                        bindings.modules[local] = target

        return bindings

    def _iter_callees(
        self,
        record: _FunctionRecord,
        bindings: _ImportBindings,
        module_names: set[str],
    ) -> Iterator[str]:
        """Yield ids of listed functions called from a function body."""
        module_name = record.module.name

        for node in ast.walk(record.node):
            if not isinstance(node, ast.Call):
                continue
            func = node.func

            if isinstance(func, ast.Name):
                local_id = f"{module_name}.{func.id}"
                if local_id in self._records:
                    yield local_id
                elif func.id in bindings.functions:
                    yield bindings.functions[func.id]

            elif isinstance(func, ast.Attribute):
                if (
                    record.receiver
                    and isinstance(func.value, ast.Name)
                    and func.value.id == record.receiver
                ):
                    method_id = f"{module_name}.{record.class_name}.{func.attr}"
                    if method_id in self._records:
                        yield method_id
                    continue

                target_module = _resolve_module_expr(func.value, bindings, module_names)
                if target_module is not None:
                    target = f"{target_module}.{func.attr}"
                    if target in self._records:
                        yield target


def _is_staticmethod(node: FunctionNode) -> bool:
    return any(
        isinstance(d, ast.Name) and d.id == "staticmethod"
        for d in node.decorator_list
    )


def _resolve_import_base(module: ParsedModule, node: ast.ImportFrom) -> Optional[str]:
    """Absolute module name an ImportFrom refers to."""
    if node.level == 0:
        return node.module

    package = list(module.parts if module.is_package else module.parts[:-1])
    up = node.level - 1
    if up > len(package):
        logger.debug("Relative import beyond top-level package in %s", module.path)
        return None
    if up:
        package = package[:-up]

    if node.module:
        package.append(node.module)
    return ".".join(package) if package else None


def _resolve_module_expr(
    expr: ast.expr,
    bindings: _ImportBindings,
    module_names: set[str],
) -> Optional[str]:
    """Resolve `a` or `a.b.c` in a call like `a.b.c.func()` to a package module."""
    dotted = _unparse_safe(expr)
    head, _, rest = dotted.partition(".")

    if head not in bindings.modules:
        return None

    resolved = bindings.modules[head] + (f".{rest}" if rest else "")
    return resolved if resolved in module_names else None

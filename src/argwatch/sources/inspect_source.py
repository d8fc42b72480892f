"""
Signature source backed by runtime introspection of an importable module.

Imports the target (and, for packages, every submodule) and reads
signatures with `inspect.signature`. Defaults are compared by `repr()`,
which matches the literal text for the common scalar defaults.
"""
import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Callable, Iterator

from argwatch.constants import EXPORTS_ATTRIBUTE, KWARG_PREFIX, VARARG_PREFIX
from argwatch.errors import UnknownFunctionError
from argwatch.models import FunctionRef, ParameterDecl
from argwatch.sources.base import is_exported, is_public_method

logger = logging.getLogger(__name__)

__all__ = ["ModuleSource", "parameters_from_signature"]


def parameters_from_signature(
    signature: inspect.Signature,
    drop_receiver: bool = False,
) -> list[ParameterDecl]:
    """
    Convert an `inspect.Signature` into parameter declarations.

    Args:
        signature: Signature to convert
        drop_receiver: Drop the first parameter (unbound `self`/`cls`)
    """
    parameters = list(signature.parameters.values())
    if drop_receiver and parameters and parameters[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        parameters = parameters[1:]

    params = []
    for param in parameters:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            params.append(ParameterDecl(f"{VARARG_PREFIX}{param.name}"))
        elif param.kind is inspect.Parameter.VAR_KEYWORD:
            params.append(ParameterDecl(f"{KWARG_PREFIX}{param.name}"))
        elif param.default is inspect.Parameter.empty:
            params.append(ParameterDecl(param.name))
        elif param.default is None:
            params.append(ParameterDecl(param.name, has_default=True, default_repr=None))
        else:
            params.append(ParameterDecl(param.name, has_default=True, default_repr=repr(param.default)))
    return params


class ModuleSource:
    """
    List and describe the functions of an importable module or package.

    Usage:
        source = ModuleSource()
        refs = source.list_functions("json")

    Importing the root module may run arbitrary package code; failures
    propagate. Submodules that fail to import are logged and skipped.
    """

    def __init__(self, include_methods: bool = False):
        self.include_methods = include_methods
        self._callables: dict[str, tuple[Callable, bool]] = {}

    def list_functions(self, scope: str, exported_only: bool = False) -> list[FunctionRef]:
        """
        Import `scope` and list the functions it defines.

        Raises:
            ModuleNotFoundError: If the module cannot be found
        """
        root = importlib.import_module(scope)
        modules = list(self._iter_modules(root))
        self._callables = {}
        listed: list[tuple[str, bool]] = []
        module_level: dict[Callable, str] = {}

        for module in modules:
            exports = getattr(module, EXPORTS_ATTRIBUTE, None)
            parts = module.__name__.split(".")

            for function_id, func, drop_receiver, exported in self._iter_module_functions(module, parts, exports):
                self._callables[function_id] = (func, drop_receiver)
                listed.append((function_id, exported))
                if function_id == f"{module.__name__}.{func.__name__}":
                    module_level[func] = function_id

        reexported = _reexported_ids(modules, module_level)

        logger.debug("Imported %s: %d functions", scope, len(self._callables))
        return [
            FunctionRef(id=function_id, exported=exported or function_id in reexported)
            for function_id, exported in listed
            if exported or function_id in reexported or not exported_only
        ]

    def get_parameters(self, function_id: str) -> list[ParameterDecl]:
        """
        Get the parameters of a listed function.

        Raises:
            UnknownFunctionError: If the function was not listed
        """
        try:
            func, drop_receiver = self._callables[function_id]
        except KeyError:
            raise UnknownFunctionError(f"Unknown function: {function_id}") from None
        return parameters_from_signature(inspect.signature(func), drop_receiver=drop_receiver)

    def _iter_modules(self, root: ModuleType) -> Iterator[ModuleType]:
        yield root

        if not hasattr(root, "__path__"):
            return

        for info in pkgutil.walk_packages(root.__path__, prefix=f"{root.__name__}."):
            try:
                yield importlib.import_module(info.name)
            except Exception as e:
                logger.warning("Failed to import %s: %s", info.name, e)

    def _iter_module_functions(
        self,
        module: ModuleType,
        parts: list[str],
        exports,
    ) -> Iterator[tuple[str, Callable, bool, bool]]:
        """Yield (id, function, drop_receiver, exported) in definition order."""
        for name, obj in list(vars(module).items()):
            if not _defined_in(obj, module) or getattr(obj, "__name__", None) != name:
                continue

            if inspect.isfunction(obj):
                yield f"{module.__name__}.{name}", obj, False, is_exported(name, parts, exports)

            elif inspect.isclass(obj) and self.include_methods:
                class_exported = is_exported(name, parts, exports)
                for attr_name, attr in vars(obj).items():
                    if isinstance(attr, staticmethod):
                        func, drop_receiver = attr.__func__, False
                    elif isinstance(attr, classmethod):
                        func, drop_receiver = attr.__func__, True
                    elif inspect.isfunction(attr):
                        func, drop_receiver = attr, True
                    else:
                        continue
                    yield (
                        f"{module.__name__}.{name}.{attr_name}",
                        func,
                        drop_receiver,
                        class_exported and is_public_method(attr_name),
                    )


def _defined_in(obj: object, module: ModuleType) -> bool:
    """True if obj was defined in module (not imported into it)."""
    return getattr(obj, "__module__", None) == module.__name__


def _reexported_ids(modules: list[ModuleType], module_level: dict[Callable, str]) -> set[str]:
    """Ids of listed functions that a package exposes under a public name."""
    reexported = set()

    for module in modules:
        if not hasattr(module, "__path__"):
            continue
        exports = getattr(module, EXPORTS_ATTRIBUTE, None)
        parts = module.__name__.split(".")

        for name, obj in vars(module).items():
            if not inspect.isfunction(obj) or obj not in module_level:
                continue
            if is_exported(name, parts, exports):
                reexported.add(module_level[obj])

    return reexported

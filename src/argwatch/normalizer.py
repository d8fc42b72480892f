"""
Normalization of parameter defaults into comparable strings.

Defaults are compared by their literal text, never by evaluated value:
`1` and `1.0` stay different. A missing default and an explicit `None`
default both normalize to the empty string so that they compare equal.
"""
from argwatch.constants import NULL_DEFAULT
from argwatch.models import ParameterDecl

__all__ = ["normalize_default", "normalize_default_value"]


def normalize_default_value(raw: object) -> str:
    """
    Convert a raw default representation into its canonical string.

    Args:
        raw: None (null marker), a string, a sequence of string tokens,
             or any other scalar

    Returns:
        Canonical string. Strings are returned unchanged, so normalizing
        an already-canonical value is a no-op.

    Example:
        >>> normalize_default_value(None)
        ''
        >>> normalize_default_value(("c(", "'a'", ")"))
        "c('a')"
    """
    if raw is None:
        return NULL_DEFAULT
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (list, tuple)):
        # Multi-token expressions are joined without separators
        return "".join(str(token) for token in raw)
    return str(raw)


def normalize_default(param: ParameterDecl) -> str:
    """
    Normalize a parameter's default for comparison.

    A parameter without a default is treated like an explicit null default.
    """
    if not param.has_default:
        return NULL_DEFAULT
    return normalize_default_value(param.default_repr)

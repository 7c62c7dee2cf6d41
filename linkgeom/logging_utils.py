from __future__ import annotations

import dataclasses
import inspect
import logging
import reprlib
from functools import wraps
from typing import Any, Callable, Iterable, MutableMapping, Optional, Sequence, Set, TypeVar, cast

import numpy as np

from .vector import MutableVector, Vector

F = TypeVar("F", bound=Callable[..., Any])

_repr = reprlib.Repr()
_repr.maxother = 160
_repr.maxdict = 8
_repr.maxlist = 8
_repr.maxtuple = 8


def _format_float(value: float) -> str:
    return f"{value:.6g}"


def summarize_value(value: Any, *, max_items: int = 6, max_length: int = 400, depth: int = 0) -> str:
    """Short, log-friendly rendering of geometry values and containers."""

    if isinstance(value, (Vector, MutableVector)):
        return f"({_format_float(value.x)}, {_format_float(value.y)})"

    if isinstance(value, np.ndarray):
        summary = f"ndarray(shape={tuple(value.shape)}, dtype={value.dtype}"
        if 0 < value.size <= max_items:
            summary += f", values={_repr.repr(value.tolist())}"
        elif value.size > max_items and np.issubdtype(value.dtype, np.number):
            summary += f", min={_format_float(float(value.min()))}, max={_format_float(float(value.max()))}"
        return summary + ")"

    if isinstance(value, float):
        return _format_float(value)

    if depth >= 2:
        return f"<{type(value).__name__}>"

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        parts = []
        for idx, f in enumerate(dataclasses.fields(value)):
            if idx >= max_items:
                parts.append("...")
                break
            parts.append(f"{f.name}={summarize_value(getattr(value, f.name), depth=depth + 1)}")
        return f"{type(value).__name__}(" + ", ".join(parts) + ")"

    if isinstance(value, dict):
        items = []
        for idx, (key, val) in enumerate(value.items()):
            if idx >= max_items:
                items.append(f"... ({len(value)} total)")
                break
            items.append(f"{summarize_value(key, depth=depth + 1)}: {summarize_value(val, depth=depth + 1)}")
        return "{" + ", ".join(items) + "}"

    if isinstance(value, (list, tuple, set, frozenset)):
        open_br, close_br = ("(", ")") if isinstance(value, tuple) else ("[", "]")
        items = []
        for idx, item in enumerate(value):
            if idx >= max_items:
                items.append(f"... ({len(value)} total)")
                break
            items.append(summarize_value(item, depth=depth + 1))
        return open_br + ", ".join(items) + close_br

    rendered = _repr.repr(value)
    if len(rendered) > max_length:
        return rendered[:max_length] + "... (truncated)"
    return rendered


def _format_arguments(args: Sequence[Any], kwargs: MutableMapping[str, Any]) -> str:
    parts = []
    if args:
        parts.append("args=[" + ", ".join(summarize_value(arg) for arg in args) + "]")
    if kwargs:
        parts.append("kwargs={" + ", ".join(f"{k}={summarize_value(v)}" for k, v in kwargs.items()) + "}")
    return ", ".join(parts) if parts else "no-args"


def debug_log_call(
    logger: logging.Logger, *, name: Optional[str] = None, log_result: bool = True
) -> Callable[[F], F]:
    """Return a decorator that traces calls, results and exceptions at DEBUG level."""

    def decorator(func: F) -> F:
        if getattr(func, "_debug_logging_wrapped", False):
            return func

        qualname = name or getattr(func, "__qualname__", getattr(func, "__name__", "<callable>"))

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            logger.debug("Entering %s (%s)", qualname, _format_arguments(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.exception("Exception in %s", qualname)
                raise
            if log_result:
                logger.debug("Exiting %s -> %s", qualname, summarize_value(result))
            else:
                logger.debug("Exiting %s", qualname)
            return result

        setattr(wrapper, "_debug_logging_wrapped", True)
        return cast(F, wrapper)

    return decorator


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap the public module-level functions of ``namespace`` with :func:`debug_log_call`.

    Private helpers (leading underscore) are left alone; they run inside the
    traced public calls.
    """

    module_name = namespace.get("__name__")
    if not isinstance(module_name, str):
        module_name = None
    logger = logger or logging.getLogger(module_name or __name__)
    skip_set: Set[str] = set(skip or [])

    for name, value in list(namespace.items()):
        if name in skip_set or name.startswith("_"):
            continue
        if inspect.isfunction(value) and getattr(value, "__module__", None) == module_name:
            namespace[name] = debug_log_call(logger, name=name)(value)


__all__ = ["apply_debug_logging", "debug_log_call", "summarize_value"]

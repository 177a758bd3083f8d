"""Helpers for dealing with API's to interact with Sonos Now Playing."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from enum import Enum
from types import NoneType, UnionType
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

_F = TypeVar("_F", bound=Callable[..., Any])
EMPTY = inspect.Parameter.empty


@dataclass
class APICommandHandler:
    """Model for an API command handler."""

    command: str
    signature: inspect.Signature
    type_hints: dict[str, Any]
    target: Callable[..., Coroutine[Any, Any, Any]]

    @classmethod
    def parse(
        cls, command: str, func: Callable[..., Coroutine[Any, Any, Any]]
    ) -> APICommandHandler:
        """Parse APICommandHandler by providing a function."""
        return APICommandHandler(
            command=command,
            signature=inspect.signature(func),
            type_hints=get_type_hints(func),
            target=func,
        )


def api_command(command: str) -> Callable[[_F], _F]:
    """Decorate a function as API route/command."""

    def decorate(func: _F) -> _F:
        func.api_cmd = command  # type: ignore[attr-defined]
        return func

    return decorate


def parse_arguments(
    func_sig: inspect.Signature,
    func_types: dict[str, Any],
    args: dict | None,
) -> dict[str, Any]:
    """Convert the (json) arguments of a command to the types of its handler.

    Arguments the handler does not take are ignored.
    """
    args = args or {}
    return {
        name: parse_value(name, args.get(name), func_types[name], param.default)
        for name, param in func_sig.parameters.items()
    }


def parse_value(name: str, value: Any, value_type: Any, default: Any = EMPTY) -> Any:
    """Convert a single argument value, raise KeyError/TypeError/ValueError if that fails."""
    if value is None:
        if default is not EMPTY:
            return default
        if NoneType in get_args(value_type):
            return None
        raise KeyError(f"Missing required argument: {name}")
    if get_origin(value_type) in (Union, UnionType):
        # optional argument, convert to the wrapped type
        value_type = next(x for x in get_args(value_type) if x is not NoneType)
    if value_type is Any:
        return value
    if get_origin(value_type) is dict:
        value_type = dict
    if isinstance(value_type, type) and issubclass(value_type, Enum):
        return value_type(value)
    # query-string style arguments
    if value_type is int and isinstance(value, str) and value.lstrip("-").isdigit():
        return int(value)
    if not isinstance(value, value_type):
        raise TypeError(f"Value {value!r} is invalid for {name}, expected {value_type.__name__}")
    return value

"""Capability descriptors built from wrapped-type introspection."""

from __future__ import annotations

import functools
import inspect
import types
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from valueholder.errors import InvalidProxiedClass

# Special methods are looked up on the type, so generated proxies must define
# them explicitly to forward. In-place operators are left out: they would
# rebind the caller's name to whatever the wrapped instance returns.
FORWARDED_SPECIAL_METHODS = frozenset(
    {
        "__call__",
        "__len__",
        "__length_hint__",
        "__iter__",
        "__next__",
        "__reversed__",
        "__contains__",
        "__getitem__",
        "__setitem__",
        "__delitem__",
        "__enter__",
        "__exit__",
        "__eq__",
        "__ne__",
        "__lt__",
        "__le__",
        "__gt__",
        "__ge__",
        "__hash__",
        "__bool__",
        "__str__",
        "__repr__",
        "__format__",
        "__bytes__",
        "__int__",
        "__float__",
        "__index__",
        "__neg__",
        "__pos__",
        "__abs__",
        "__invert__",
        "__round__",
        "__trunc__",
        "__floor__",
        "__ceil__",
        "__complex__",
        "__fspath__",
        "__await__",
        "__aiter__",
        "__anext__",
        "__aenter__",
        "__aexit__",
    }
    | {
        f"__{prefix}{operator}__"
        for operator in (
            "add",
            "sub",
            "mul",
            "matmul",
            "truediv",
            "floordiv",
            "mod",
            "divmod",
            "pow",
            "lshift",
            "rshift",
            "and",
            "xor",
            "or",
        )
        for prefix in ("", "r")
    }
)


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


@dataclass(frozen=True)
class MethodDescriptor:
    """Name and signature of one mirrored instance method."""

    name: str
    signature: Optional[inspect.Signature]
    doc: Optional[str] = None
    native: bool = False
    is_coroutine: bool = False

    @functools.cached_property
    def call_signature(self) -> Optional[inspect.Signature]:
        """Signature as seen by callers, without the instance parameter."""
        if self.signature is None:
            return None
        parameters = list(self.signature.parameters.values())
        if not parameters or parameters[0].kind not in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            return None
        return self.signature.replace(parameters=parameters[1:])

    def bind(self, args: tuple, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        """Map call arguments to an ordered ``{parameter: value}`` dict.

        Defaults are applied. Methods whose signature cannot be introspected
        report ``{"args": ..., "kwargs": ...}`` instead, as do C-level methods
        whose text signature does not accept the call; the wrapped method
        itself decides whether such a call is valid.
        """
        signature = self.call_signature
        if signature is None:
            return {"args": tuple(args), "kwargs": dict(kwargs)}
        try:
            bound = signature.bind(*args, **kwargs)
        except TypeError:
            if not self.native:
                raise
            return {"args": tuple(args), "kwargs": dict(kwargs)}
        bound.apply_defaults()
        return dict(bound.arguments)


@dataclass(frozen=True)
class CapabilityDescriptor:
    """Member surface of a wrapped type that a proxy type mirrors."""

    target: type
    methods: Tuple[MethodDescriptor, ...] = ()
    special_methods: Tuple[MethodDescriptor, ...] = ()
    properties: Tuple[str, ...] = ()
    class_members: Tuple[str, ...] = ()
    attributes: Tuple[str, ...] = ()

    def method(self, name: str) -> Optional[MethodDescriptor]:
        for method in self.methods + self.special_methods:
            if method.name == name:
                return method
        return None

    def member_names(self) -> List[str]:
        names = [method.name for method in self.methods]
        names.extend(self.properties)
        names.extend(self.class_members)
        names.extend(self.attributes)
        return sorted(names)


# Routines that bind to instances: Python functions plus the C-level method and
# slot-wrapper descriptors found on builtin-derived classes such as dict subclasses.
_NATIVE_INSTANCE_ROUTINES = (types.MethodDescriptorType, types.WrapperDescriptorType)


def _is_instance_routine(value: Any) -> bool:
    return inspect.isfunction(value) or isinstance(value, _NATIVE_INSTANCE_ROUTINES)


def _describe_method(name: str, function: Any) -> MethodDescriptor:
    try:
        signature: Optional[inspect.Signature] = inspect.signature(function)
    except (TypeError, ValueError):
        signature = None
    return MethodDescriptor(
        name=name,
        signature=signature,
        doc=inspect.getdoc(function),
        native=not inspect.isfunction(function),
        is_coroutine=inspect.iscoroutinefunction(function),
    )


def _validate_target(target: Any) -> None:
    from valueholder.proxy import LazyLoadingValueHolder

    if not isinstance(target, type):
        raise InvalidProxiedClass(f"can only proxy classes, got {type(target).__name__} instance {target!r}")
    if issubclass(target, LazyLoadingValueHolder):
        raise InvalidProxiedClass(f"{target.__qualname__} is already a lazy-loading value holder")
    if target.__module__ == "builtins":
        raise InvalidProxiedClass(f"builtin type {target.__qualname__} cannot be proxied")


def describe(target: type, *, include_private: bool = False) -> CapabilityDescriptor:
    """Introspect ``target`` once and describe the members a proxy mirrors."""
    _validate_target(target)

    members: Dict[str, Any] = {}
    for klass in reversed(target.__mro__):
        if klass is object:
            continue
        members.update(vars(klass))

    methods: List[MethodDescriptor] = []
    special_methods: List[MethodDescriptor] = []
    properties: List[str] = []
    class_members: List[str] = []
    attributes: List[str] = []

    for name, value in members.items():
        if _is_dunder(name):
            if name in FORWARDED_SPECIAL_METHODS and _is_instance_routine(value):
                special_methods.append(_describe_method(name, value))
            continue
        if name.startswith("_") and not include_private:
            continue
        if isinstance(value, (property, functools.cached_property)):
            properties.append(name)
        elif isinstance(value, (staticmethod, classmethod, types.ClassMethodDescriptorType)):
            class_members.append(name)
        elif _is_instance_routine(value):
            methods.append(_describe_method(name, value))
        else:
            attributes.append(name)

    return CapabilityDescriptor(
        target=target,
        methods=tuple(methods),
        special_methods=tuple(special_methods),
        properties=tuple(properties),
        class_members=tuple(class_members),
        attributes=tuple(attributes),
    )

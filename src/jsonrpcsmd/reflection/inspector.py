from __future__ import annotations

import importlib
import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Optional, Union

from jsonrpcsmd.errors import ReflectionError

logger = logging.getLogger(__name__)

EMPTY = inspect.Parameter.empty

ClassIdentifier = Union[type, str]


@dataclass(frozen=True)
class ParamShape:
    name: str
    kind: inspect._ParameterKind
    has_default: bool
    default: Any = None
    annotation: Any = EMPTY

    @property
    def is_variadic(self) -> bool:
        return self.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class MethodShape:
    name: str
    kind: str  # "method" | "staticmethod" | "classmethod"
    parameters: tuple[ParamShape, ...]
    return_annotation: Any = EMPTY
    doc: Optional[str] = None


@dataclass(frozen=True)
class ClassShape:
    short_name: str
    qualified_name: str
    cls: type
    methods: tuple[MethodShape, ...]

    def method(self, name: str) -> Optional[MethodShape]:
        for m in self.methods:
            if m.name == name:
                return m
        return None


def resolve_class(identifier: ClassIdentifier) -> type:
    """
    Resolve a class object from:
      - the class itself
      - "package.module:Class" or "package.module:Outer.Inner"
      - "package.module.Class"
    """
    if isinstance(identifier, type):
        return identifier
    if not isinstance(identifier, str) or not identifier.strip():
        raise ReflectionError(f"Cannot resolve class from {identifier!r}")

    text = identifier.strip()
    if ":" in text:
        module_name, _, attr_path = text.partition(":")
    else:
        module_name, _, attr_path = text.rpartition(".")
    if not module_name or not attr_path:
        raise ReflectionError(f"Class identifier must include its module: {identifier!r}")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ReflectionError(f"Cannot import module {module_name!r} for {identifier!r}: {exc}") from exc

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ReflectionError(f"{identifier!r} does not exist: no attribute {part!r}") from exc

    if not isinstance(obj, type):
        raise ReflectionError(f"{identifier!r} is not a class")
    return obj


def _type_hints(func: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError, AttributeError):
        # unresolvable forward references: keep the raw annotations
        return dict(getattr(func, "__annotations__", {}) or {})


def _own_doc(func: Any) -> Optional[str]:
    doc = getattr(func, "__doc__", None)
    if not doc:
        return None
    return inspect.cleandoc(doc)


def _method_shape(name: str, member: Any, owner: type) -> Optional[MethodShape]:
    if isinstance(member, staticmethod):
        kind, func = "staticmethod", member.__func__
    elif isinstance(member, classmethod):
        kind, func = "classmethod", member.__func__
    elif inspect.isfunction(member):
        kind, func = "method", member
    else:
        return None

    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError) as exc:
        raise ReflectionError(f"Cannot read the signature of {owner.__qualname__}.{name}: {exc}") from exc

    hints = _type_hints(func)
    params = list(sig.parameters.values())
    if kind != "staticmethod" and params and params[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        params = params[1:]  # self / cls

    shapes = tuple(
        ParamShape(
            name=p.name,
            kind=p.kind,
            has_default=p.default is not EMPTY,
            default=None if p.default is EMPTY else p.default,
            annotation=hints.get(p.name, p.annotation),
        )
        for p in params
    )

    return_annotation = hints.get("return", sig.return_annotation)

    return MethodShape(
        name=name,
        kind=kind,
        parameters=shapes,
        return_annotation=return_annotation,
        doc=_own_doc(func),
    )


def reflect(identifier: ClassIdentifier) -> ClassShape:
    """
    Reflect the public methods declared directly on a class.

    Inherited members, names starting with "_" (constructors, dunders,
    private helpers), properties and nested classes are skipped. Methods
    keep their declaration order.
    """
    cls = resolve_class(identifier)

    methods: list[MethodShape] = []
    for name, member in vars(cls).items():
        if name.startswith("_"):
            continue
        shape = _method_shape(name, member, cls)
        if shape is None:
            logger.debug("Skipping non-method member %s.%s", cls.__qualname__, name)
            continue
        methods.append(shape)

    return ClassShape(
        short_name=cls.__name__,
        qualified_name=f"{cls.__module__}.{cls.__qualname__}",
        cls=cls,
        methods=tuple(methods),
    )

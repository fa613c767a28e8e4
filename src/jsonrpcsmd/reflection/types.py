from __future__ import annotations

import collections.abc
import decimal
import re
import types
import typing
from typing import Any, Optional, Union

NULL = "null"
ANY = "any"

_CLASS_TYPES: dict[Any, str] = {
    str: "string",
    bytes: "string",
    bool: "boolean",
    int: "integer",
    float: "number",
    decimal.Decimal: "number",
    list: "array",
    tuple: "array",
    set: "array",
    frozenset: "array",
    dict: "object",
    type(None): NULL,
}

_ABC_ARRAYS = (collections.abc.Sequence, collections.abc.Set)

_DOC_NAMES: dict[str, str] = {
    "str": "string",
    "string": "string",
    "bytes": "string",
    "int": "integer",
    "integer": "integer",
    "float": "number",
    "double": "number",
    "number": "number",
    "decimal": "number",
    "bool": "boolean",
    "boolean": "boolean",
    "list": "array",
    "array": "array",
    "tuple": "array",
    "set": "array",
    "sequence": "array",
    "dict": "object",
    "object": "object",
    "mapping": "object",
    "none": NULL,
    "null": NULL,
    "void": NULL,
    "any": ANY,
    "mixed": ANY,
}

_OPTIONAL_RE = re.compile(r"^(?:typing\.)?Optional\[(.+)\]$")
_GENERIC_RE = re.compile(r"^([A-Za-z_][\w.]*)\[.*\]$")


def _collapse(names: list[str]) -> Optional[Union[str, list[str]]]:
    seen: list[str] = []
    for n in names:
        if n not in seen:
            seen.append(n)
    if not seen:
        return None
    if len(seen) == 1:
        return seen[0]
    return seen


def _union_members(annotation: Any) -> Optional[tuple[Any, ...]]:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        return typing.get_args(annotation)
    return None


def _single_type(annotation: Any) -> str:
    if annotation is None or annotation is type(None):
        return NULL
    if annotation is Any:
        return ANY
    if isinstance(annotation, str):
        mapped, _ = doc_type_to_smd(annotation)
        if isinstance(mapped, list):
            return ANY
        return mapped or ANY
    if isinstance(annotation, typing.TypeVar):
        return ANY

    origin = typing.get_origin(annotation)
    if origin is typing.Literal:
        values = typing.get_args(annotation)
        return _single_type(type(values[0])) if values else ANY
    if origin is typing.Annotated:
        return _single_type(typing.get_args(annotation)[0])
    if origin is not None:
        annotation = origin

    if annotation in _CLASS_TYPES:
        return _CLASS_TYPES[annotation]
    if isinstance(annotation, type):
        if issubclass(annotation, bool):
            return "boolean"
        if issubclass(annotation, collections.abc.Mapping):
            return "object"
        if issubclass(annotation, (str, bytes)):
            return "string"
        if issubclass(annotation, _ABC_ARRAYS):
            return "array"
        for base, name in _CLASS_TYPES.items():
            if base is not type(None) and issubclass(annotation, base):
                return name
    return "object"


def annotation_to_smd(annotation: Any) -> tuple[Optional[Union[str, list[str]]], bool]:
    """
    Map a Python annotation to an SMD type.

    Returns (type, nullable). ``Optional[X]`` and ``X | None`` yield X with
    nullable=True; unions of several members yield a list of type names.
    """
    members = _union_members(annotation)
    if members is None:
        if isinstance(annotation, str):
            return doc_type_to_smd(annotation)
        name = _single_type(annotation)
        return name, name == NULL

    nullable = any(m is type(None) for m in members)
    names = [_single_type(m) for m in members if m is not type(None)]
    if not names:
        return NULL, True
    return _collapse(names), nullable


def doc_type_to_smd(text: str) -> tuple[Optional[Union[str, list[str]]], bool]:
    """Map a type name written in documentation (``int``, ``string|null``, ``Optional[str]``)."""
    text = (text or "").strip()
    if not text:
        return None, False

    nullable = False
    m = _OPTIONAL_RE.match(text)
    if m:
        text = m.group(1)
        nullable = True

    names: list[str] = []
    for part in text.split("|"):
        part = part.strip()
        if not part:
            continue
        g = _GENERIC_RE.match(part)
        if g:
            part = g.group(1)
        key = part.rsplit(".", 1)[-1].lower()
        name = _DOC_NAMES.get(key, "object")
        if name == NULL:
            nullable = True
            continue
        names.append(name)

    if not names:
        return NULL, True
    return _collapse(names), nullable


def is_doc_type_name(text: str) -> bool:
    """True for tokens written as a type in documentation: known names or type syntax."""
    text = (text or "").strip()
    if not text:
        return False
    if any(c in text for c in "[|."):
        return True
    return text.lower() in _DOC_NAMES

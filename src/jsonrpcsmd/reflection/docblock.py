from __future__ import annotations

import inspect
import re
from dataclasses import dataclass, field
from typing import Optional

from jsonrpcsmd.reflection.types import is_doc_type_name

_NAME = re.compile(r"^\$?([A-Za-z_]\w*)$")


@dataclass
class DocParam:
    name: str
    type: Optional[str] = None
    description: str = ""


@dataclass
class DocReturn:
    type: Optional[str] = None
    description: str = ""


@dataclass
class DocBlock:
    summary: str = ""
    params: dict[str, DocParam] = field(default_factory=dict)
    returns: Optional[DocReturn] = None

    def param_type(self, name: str) -> Optional[str]:
        p = self.params.get(name)
        return p.type if p else None

    def param_description(self, name: str) -> str:
        p = self.params.get(name)
        return p.description if p else ""


def _param(block: DocBlock, name: str) -> DocParam:
    if name not in block.params:
        block.params[name] = DocParam(name=name)
    return block.params[name]


def _returns(block: DocBlock) -> DocReturn:
    if block.returns is None:
        block.returns = DocReturn()
    return block.returns


def _split_tag(line: str) -> tuple[str, str]:
    # "@param int a: desc" -> ("param", "int a: desc"); ":rtype: int" -> ("rtype", ": int")
    if line.startswith("@"):
        m = re.match(r"^@(\w+)\s*(.*)$", line)
    else:
        m = re.match(r"^:(\w+)\s*(.*)$", line)
    if not m:
        return "", ""
    return m.group(1).lower(), m.group(2)


def _split_type(text: str) -> tuple[str, str]:
    # "dict[str, int] opts desc" -> ("dict[str, int]", "opts desc")
    text = text.strip()
    depth = 0
    for i, ch in enumerate(text):
        if ch in "[(":
            depth += 1
        elif ch in "])":
            depth -= 1
        elif ch.isspace() and depth <= 0:
            return text[:i], text[i:].strip()
    return text, ""


def _parse_param(rest: str) -> Optional[tuple[Optional[str], str, str]]:
    """
    Accepted forms (``$`` before the name is tolerated):
      int a: desc   /  a: desc       (epydoc and Sphinx field lists)
      int a desc    /  int $a desc   (type first, no colon)
      a desc        /  a             (no type)
    Without a colon the first token is a type only when it reads as one
    (a known type name, or contains "[", "|" or "."), or when the name
    after it carries a "$".
    Returns (type, name, description) or None when no name can be found.
    """
    head, sep, desc = rest.partition(":")
    if sep:
        first, remainder = _split_type(head)
        if not remainder and _NAME.match(first):
            return None, _NAME.match(first).group(1), desc.strip()
        if remainder and _NAME.match(remainder):
            return first, _NAME.match(remainder).group(1), desc.strip()

    first, remainder = _split_type(rest)
    if not first:
        return None
    if remainder:
        name_token, *tail = remainder.split(None, 1)
        m = _NAME.match(name_token)
        if m and (is_doc_type_name(first) or name_token.startswith("$")):
            return first, m.group(1), tail[0].strip() if tail else ""

    m = _NAME.match(first)
    if not m:
        return None
    return None, m.group(1), remainder


def _parse_return(rest: str) -> DocReturn:
    rest = rest.strip()
    if rest.startswith(":"):
        return DocReturn(description=rest[1:].strip())
    if not rest:
        return DocReturn()
    first, remainder = _split_type(rest)
    if is_doc_type_name(first):
        return DocReturn(type=first, description=remainder)
    return DocReturn(description=rest)


def parse_docblock(text: Optional[str]) -> DocBlock:
    """
    Parse the documentation of a method into summary, parameter and return tags.

    Understands ``@param``/``@type``/``@return``/``@rtype`` tags and the
    Sphinx field list (``:param:``, ``:type:``, ``:returns:``, ``:rtype:``).
    The summary is the first paragraph before any tag line. Unknown tags and
    continuation lines of tag descriptions are ignored.
    """
    block = DocBlock()
    if not text:
        return block

    summary: list[str] = []
    in_summary = True

    for raw in inspect.cleandoc(text).splitlines():
        line = raw.strip()

        if not line.startswith(("@", ":")):
            if in_summary:
                if line:
                    summary.append(line)
                elif summary:
                    in_summary = False
            continue

        in_summary = False
        tag, rest = _split_tag(line)

        if tag == "param":
            parsed = _parse_param(rest)
            if parsed is None:
                continue
            typ, name, desc = parsed
            p = _param(block, name)
            p.type = typ or p.type
            p.description = desc or p.description

        elif tag == "type":
            head, sep, typ = rest.partition(":")
            m = _NAME.match(head.strip())
            if sep and m and typ.strip():
                _param(block, m.group(1)).type = typ.strip()

        elif tag in ("return", "returns"):
            parsed_ret = _parse_return(rest)
            r = _returns(block)
            r.type = parsed_ret.type or r.type
            r.description = parsed_ret.description or r.description

        elif tag == "rtype":
            typ = rest.lstrip(":").strip()
            if typ:
                _returns(block).type = typ

    block.summary = " ".join(summary)
    return block

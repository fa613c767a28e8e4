from __future__ import annotations

import inspect
import logging
import math
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

from jsonrpcsmd.domain.models import MethodEntry, ParamSpec, SmdConfig
from jsonrpcsmd.reflection.docblock import DocBlock, parse_docblock
from jsonrpcsmd.reflection.inspector import (
    EMPTY,
    ClassIdentifier,
    ClassShape,
    MethodShape,
    ParamShape,
    reflect,
)
from jsonrpcsmd.reflection.types import annotation_to_smd, doc_type_to_smd


logger = logging.getLogger(__name__)

_JSON_NATIVE = (str, int, float, bool, type(None))


def default_service_name(class_shape: ClassShape, method: MethodShape) -> str:
    return f"{class_shape.short_name}.{method.name}"


def canonical_target(target: str, service_name: str) -> str:
    # http://x/rpc + Calculator.add -> http://x/rpc/Calculator.add
    return f"{target.rstrip('/')}/{quote(service_name, safe='')}"


def _is_json_scalar(value: Any) -> bool:
    # inf and nan have no JSON spelling
    if isinstance(value, float) and not math.isfinite(value):
        return False
    return isinstance(value, _JSON_NATIVE)


def _json_default(value: Any) -> Any:
    if _is_json_scalar(value):
        return value
    if isinstance(value, (list, tuple)) and all(_is_json_scalar(v) for v in value):
        return list(value)
    if isinstance(value, dict) and all(
        isinstance(k, str) and _is_json_scalar(v) for k, v in value.items()
    ):
        return dict(value)
    return repr(value)


def _param_spec(param: ParamShape, doc: DocBlock) -> ParamSpec:
    smd_type = None
    nullable = False

    if param.annotation is not EMPTY:
        smd_type, nullable = annotation_to_smd(param.annotation)
    elif doc.param_type(param.name):
        smd_type, nullable = doc_type_to_smd(doc.param_type(param.name) or "")
    elif param.kind == inspect.Parameter.VAR_POSITIONAL:
        smd_type = "array"
    elif param.kind == inspect.Parameter.VAR_KEYWORD:
        smd_type = "object"

    return ParamSpec(
        name=param.name,
        type=smd_type,
        optional=param.has_default or nullable or param.is_variadic,
        default=_json_default(param.default) if param.has_default else None,
        has_default=param.has_default,
        description=doc.param_description(param.name),
    )


def _return_type(method: MethodShape, doc: DocBlock):
    if method.return_annotation is not EMPTY:
        smd_type, _ = annotation_to_smd(method.return_annotation)
        return smd_type
    if doc.returns is not None and doc.returns.type:
        smd_type, _ = doc_type_to_smd(doc.returns.type)
        return smd_type
    return None


@dataclass(frozen=True)
class ServiceDescriptor:
    """The reflected shape of one registered class; entries are built per snapshot of options."""

    shape: ClassShape

    @classmethod
    def read(cls, identifier: ClassIdentifier, options: SmdConfig) -> Optional["ServiceDescriptor"]:
        """
        Reflect ``identifier`` and run the configured service validator.

        Returns None when the validator rejects the class. ReflectionError
        propagates when the class cannot be resolved.
        """
        shape = reflect(identifier)
        if options.service_validator is not None and not options.service_validator(shape):
            logger.debug("Service validator rejected %s", shape.qualified_name)
            return None
        return cls(shape=shape)

    @property
    def name(self) -> str:
        return self.shape.qualified_name

    def service_name(self, method: MethodShape, options: SmdConfig) -> str:
        if options.name_resolver is not None:
            return str(options.name_resolver(self.shape, method))
        return default_service_name(self.shape, method)

    def entries(self, options: SmdConfig) -> list[MethodEntry]:
        out: list[MethodEntry] = []
        for method in self.shape.methods:
            name = self.service_name(method, options)
            doc = parse_docblock(method.doc)
            target = options.target or ""
            if options.use_canonical and target:
                target = canonical_target(target, name)

            out.append(
                MethodEntry(
                    name=name,
                    transport=options.transport,
                    content_type=options.content_type,
                    target=target,
                    parameters=[_param_spec(p, doc) for p in method.parameters],
                    returns=_return_type(method, doc),
                    description=doc.summary,
                    source=self.name,
                )
            )
        return out

    def to_dict(self, options: SmdConfig) -> dict[str, dict[str, Any]]:
        return {e.name: e.to_smd() for e in self.entries(options)}

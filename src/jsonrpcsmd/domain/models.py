from __future__ import annotations

from typing import Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

SmdType = Union[str, list[str]]
CollisionPolicy = Literal["overwrite", "error"]


class ParamSpec(BaseModel):
    name: str
    type: Optional[SmdType] = None
    optional: bool = False
    default: Any = None
    has_default: bool = False
    description: str = ""

    def to_smd(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        if self.type is not None:
            out["type"] = self.type
        out["optional"] = self.optional
        if self.has_default:
            out["default"] = self.default
        if self.description:
            out["description"] = self.description
        return out


class MethodEntry(BaseModel):
    """One published RPC method, keyed by ``name`` in the merged service map."""

    name: str
    transport: str
    content_type: str
    target: str
    parameters: list[ParamSpec] = Field(default_factory=list)
    returns: Optional[SmdType] = None
    description: str = ""
    source: str = ""  # qualified name of the class that declared it

    def to_smd(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "transport": self.transport,
            "contentType": self.content_type,
            "parameters": [p.to_smd() for p in self.parameters],
        }
        if self.returns is not None:
            out["returns"] = self.returns
        out["target"] = self.target
        if self.description:
            out["description"] = self.description
        return out


class SmdConfig(BaseModel):
    """
    Immutable snapshot of the assembler options.

    Hooks:
      - service_validator(class_shape) -> bool
      - name_resolver(class_shape, method_shape) -> str
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    transport: str = "POST"
    content_type: str = "application/json"
    envelope: str = Field(default="V2", min_length=1)
    target: Optional[str] = None
    use_canonical: bool = False
    service_validator: Optional[Callable[..., Any]] = None
    name_resolver: Optional[Callable[..., Any]] = None
    on_collision: CollisionPolicy = "overwrite"

    @field_validator("transport")
    @classmethod
    def _upper_transport(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("transport must not be empty")
        return v

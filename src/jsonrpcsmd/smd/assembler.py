from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError

from jsonrpcsmd.domain.models import CollisionPolicy, MethodEntry, SmdConfig
from jsonrpcsmd.envelope.registry import resolve_envelope
from jsonrpcsmd.errors import ConfigurationError, ServiceCollisionError
from jsonrpcsmd.reflection.inspector import ClassIdentifier
from jsonrpcsmd.smd.service import ServiceDescriptor

logger = logging.getLogger(__name__)


class Smd:
    """
    Builds the service map of the registered classes.

    Register classes with ``add_class`` and read the map with ``to_dict`` or
    ``to_json``. Only the map is produced; answering the remote calls is up
    to whatever RPC server consumes it.

    Specs followed:
      - http://www.simple-is-better.org/json-rpc/jsonrpc20-smd.html
      - https://dojotoolkit.org/reference-guide/1.10/dojox/rpc/smd.html
    """

    def __init__(self, target: Optional[str] = None, envelope: Optional[str] = None, **options: Any):
        self.config = SmdConfig()
        self.services: list[ServiceDescriptor] = []
        if target is not None:
            options["target"] = target
        if envelope is not None:
            options["envelope"] = envelope
        if options:
            self.configure(**options)

    # ----------------------------
    # Configuration
    # ----------------------------

    def configure(self, **changes: Any) -> "Smd":
        current = {name: getattr(self.config, name) for name in SmdConfig.model_fields}
        try:
            self.config = SmdConfig(**{**current, **changes})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid SMD options: {exc}") from exc
        return self

    def set_transport(self, transport: str) -> "Smd":
        return self.configure(transport=transport)

    def set_content_type(self, content_type: str) -> "Smd":
        return self.configure(content_type=content_type)

    def set_envelope(self, envelope: str) -> "Smd":
        return self.configure(envelope=envelope)

    def set_target(self, target: Optional[str]) -> "Smd":
        return self.configure(target=target)

    def set_use_canonical(self, value: bool) -> "Smd":
        return self.configure(use_canonical=value)

    def set_service_validator(self, validator: Optional[Callable[..., Any]]) -> "Smd":
        """The validator receives the reflected ClassShape; a falsy result skips the class."""
        return self.configure(service_validator=validator)

    def set_name_resolver(self, resolver: Optional[Callable[..., Any]]) -> "Smd":
        """The resolver receives (ClassShape, MethodShape) and returns the published name."""
        return self.configure(name_resolver=resolver)

    def set_on_collision(self, policy: CollisionPolicy) -> "Smd":
        return self.configure(on_collision=policy)

    # ----------------------------
    # Registration
    # ----------------------------

    def add_class(self, identifier: ClassIdentifier) -> "Smd":
        """
        Add a class to the list of classes exposed remotely.

        The configured service validator runs first; a rejected class is
        silently left out.
        """
        descriptor = ServiceDescriptor.read(identifier, self.config)
        if descriptor is not None:
            self.services.append(descriptor)
        return self

    def add_classes(self, *identifiers: ClassIdentifier) -> "Smd":
        for identifier in identifiers:
            self.add_class(identifier)
        return self

    # ----------------------------
    # Output
    # ----------------------------

    def _merge(self, options: SmdConfig) -> dict[str, dict[str, Any]]:
        merged: dict[str, MethodEntry] = {}
        for descriptor in self.services:
            for entry in descriptor.entries(options):
                previous = merged.get(entry.name)
                if previous is not None:
                    if options.on_collision == "error":
                        raise ServiceCollisionError(entry.name, previous.source, entry.source)
                    logger.debug(
                        "Service %s from %s overwrites the one from %s",
                        entry.name,
                        entry.source,
                        previous.source,
                    )
                merged[entry.name] = entry
        return {name: entry.to_smd() for name, entry in merged.items()}

    def to_dict(self) -> dict[str, Any]:
        """
        Return the service map as a dict.

        Raises ConfigurationError when the target is not defined or the
        envelope is unknown.
        """
        options = self.config
        if not options.target:
            raise ConfigurationError("The target is not defined")

        envelope = resolve_envelope(options.envelope)
        services = self._merge(options)
        return envelope.build(options, services)

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __str__(self) -> str:
        return self.to_json()

from __future__ import annotations


class SmdError(Exception):
    """Base class for every error raised while building a service map."""


class ConfigurationError(SmdError):
    """The assembler options cannot produce a document (no target, unknown envelope, ...)."""


class ServiceCollisionError(ConfigurationError):
    def __init__(self, service_name: str, previous: str, current: str):
        self.service_name = service_name
        self.previous = previous
        self.current = current
        super().__init__(
            f"Service {service_name!r} from {current} collides with the one from {previous}"
        )


class ReflectionError(SmdError):
    """A class identifier could not be resolved or introspected."""

from __future__ import annotations

from typing import Callable

from jsonrpcsmd.envelope.base import Envelope
from jsonrpcsmd.envelope.v1 import V1
from jsonrpcsmd.envelope.v2 import V2
from jsonrpcsmd.errors import ConfigurationError

EnvelopeFactory = Callable[[], Envelope]

ENVELOPES: dict[str, EnvelopeFactory] = {
    "V1": V1,
    "V2": V2,
}


def register_envelope(name: str, factory: EnvelopeFactory) -> None:
    if not name:
        raise ConfigurationError("Envelope name must not be empty")
    ENVELOPES[name] = factory


def available_envelopes() -> list[str]:
    return sorted(ENVELOPES)


def resolve_envelope(name: str) -> Envelope:
    factory = ENVELOPES.get(name)
    if factory is None:
        raise ConfigurationError(
            f"Unknown envelope {name!r} (available: {', '.join(available_envelopes())})"
        )
    return factory()

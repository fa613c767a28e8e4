from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from jsonrpcsmd.domain.models import SmdConfig


class Envelope(ABC):
    """Wraps the merged service map into a protocol-specific SMD document."""

    name: str = ""
    protocol: str = ""
    smd_version: str = ""

    @abstractmethod
    def build(self, options: SmdConfig, services: dict[str, dict[str, Any]]) -> dict[str, Any]:
        raise NotImplementedError

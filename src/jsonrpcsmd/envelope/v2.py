from __future__ import annotations

from typing import Any

from jsonrpcsmd.domain.models import SmdConfig
from jsonrpcsmd.envelope.base import Envelope


class V2(Envelope):
    """
    JSON-RPC 2.0 SMD:

      {"transport", "envelope": "JSON-RPC-2.0", "contentType",
       "SMDVersion": "2.0", "target", "services": {...}}
    """

    name = "V2"
    protocol = "JSON-RPC-2.0"
    smd_version = "2.0"

    def _service(self, entry: dict[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in entry.items():
            out[key] = value
            if key == "transport":
                out["envelope"] = self.protocol
        out.setdefault("envelope", self.protocol)
        return out

    def build(self, options: SmdConfig, services: dict[str, dict[str, Any]]) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "transport": options.transport,
            "envelope": self.protocol,
            "contentType": options.content_type,
            "SMDVersion": self.smd_version,
        }
        if options.target:
            doc["target"] = options.target
        doc["services"] = {name: self._service(entry) for name, entry in services.items()}
        return doc

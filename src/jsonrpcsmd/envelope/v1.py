from __future__ import annotations

from typing import Any

from jsonrpcsmd.domain.models import SmdConfig
from jsonrpcsmd.envelope.base import Envelope


class V1(Envelope):
    """
    Dojo SMD 1.0 (JSON-RPC 1.0). Methods are a list and only carry name and
    typed parameter names; a per-method serviceURL appears when it differs
    from the document one.
    """

    name = "V1"
    protocol = "JSON-RPC"
    smd_version = "1.0"

    def build(self, options: SmdConfig, services: dict[str, dict[str, Any]]) -> dict[str, Any]:
        methods: list[dict[str, Any]] = []
        for name, entry in services.items():
            params = []
            for p in entry.get("parameters", []):
                param = {"name": p["name"]}
                if "type" in p:
                    param["type"] = p["type"]
                params.append(param)

            method: dict[str, Any] = {"name": name, "parameters": params}
            target = entry.get("target")
            if target and target != options.target:
                method["serviceURL"] = target
            methods.append(method)

        return {
            "SMDVersion": self.smd_version,
            "serviceType": self.protocol,
            "serviceURL": options.target,
            "methods": methods,
        }

import pytest

from jsonrpcsmd.envelope.base import Envelope
from jsonrpcsmd.envelope.registry import ENVELOPES, available_envelopes, register_envelope, resolve_envelope
from jsonrpcsmd.envelope.v1 import V1
from jsonrpcsmd.envelope.v2 import V2
from jsonrpcsmd.errors import ConfigurationError
from jsonrpcsmd.smd.assembler import Smd
from sample_services import Calculator


class Bare(Envelope):
    name = "Bare"

    def build(self, options, services):
        return {"services": services}


def test_registry_resolves_builtin_envelopes():
    assert isinstance(resolve_envelope("V2"), V2)
    assert isinstance(resolve_envelope("V1"), V1)
    assert {"V1", "V2"} <= set(available_envelopes())


def test_unknown_envelope_raises():
    with pytest.raises(ConfigurationError):
        resolve_envelope("nope")


def test_register_custom_envelope(monkeypatch):
    monkeypatch.setitem(ENVELOPES, "Bare", Bare)
    doc = Smd(target="http://x/rpc", envelope="Bare").add_class(Calculator).to_dict()
    assert list(doc) == ["services"]
    assert "Calculator.add" in doc["services"]


def test_register_envelope_rejects_empty_name():
    with pytest.raises(ConfigurationError):
        register_envelope("", Bare)


def test_v1_dojo_shape():
    doc = Smd(target="http://x/rpc", envelope="V1").add_class(Calculator).to_dict()

    assert doc["SMDVersion"] == "1.0"
    assert doc["serviceType"] == "JSON-RPC"
    assert doc["serviceURL"] == "http://x/rpc"
    assert doc["methods"][0] == {
        "name": "Calculator.add",
        "parameters": [{"name": "a", "type": "integer"}, {"name": "b", "type": "integer"}],
    }


def test_v1_per_method_urls_with_canonical_targets():
    doc = Smd(target="http://x/rpc", envelope="V1", use_canonical=True).add_class(Calculator).to_dict()
    assert doc["methods"][0]["serviceURL"] == "http://x/rpc/Calculator.add"

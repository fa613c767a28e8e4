import inspect

import pytest

from jsonrpcsmd.errors import ReflectionError
from jsonrpcsmd.reflection.inspector import EMPTY, reflect, resolve_class
from sample_services import Calculator, Empty, Outer, ScientificCalculator


def test_resolve_class_accepts_objects_and_dotted_names():
    assert resolve_class(Calculator) is Calculator
    assert resolve_class("sample_services:Calculator") is Calculator
    assert resolve_class("sample_services.Calculator") is Calculator
    assert resolve_class("sample_services:Outer.Inner") is Outer.Inner


@pytest.mark.parametrize(
    "identifier",
    [
        "no_such_module_for_smd:Thing",
        "sample_services:Missing",
        "sample_services:NOT_A_CLASS",
        "Calculator",
        "",
        42,
    ],
)
def test_resolve_class_failures_raise_reflection_error(identifier):
    with pytest.raises(ReflectionError):
        resolve_class(identifier)


def test_reflect_lists_public_own_methods_in_declaration_order():
    shape = reflect(Calculator)
    assert shape.short_name == "Calculator"
    assert shape.qualified_name == "sample_services.Calculator"
    # __init__, __eq__, _round, the property and the class attribute are skipped
    assert [m.name for m in shape.methods] == ["add", "divide", "pi", "create"]
    assert [m.kind for m in shape.methods] == ["method", "method", "staticmethod", "classmethod"]


def test_reflect_drops_receiver_and_keeps_defaults():
    shape = reflect(Calculator)

    add = shape.method("add")
    assert [p.name for p in add.parameters] == ["a", "b"]
    assert add.parameters[0].annotation is int
    assert add.return_annotation is int

    divide = shape.method("divide")
    assert divide.parameters[0].annotation is EMPTY
    assert divide.parameters[1].has_default is True
    assert divide.parameters[1].default == 1
    assert divide.doc.startswith("Divide a by b.")

    assert shape.method("pi").parameters == ()
    create = shape.method("create")
    assert [p.name for p in create.parameters] == ["precision"]
    assert create.parameters[0].kind == inspect.Parameter.POSITIONAL_OR_KEYWORD


def test_reflect_excludes_inherited_methods():
    shape = reflect(ScientificCalculator)
    assert [m.name for m in shape.methods] == ["power"]


def test_reflect_class_without_public_methods():
    assert reflect(Empty).methods == ()


def test_reflect_stdlib_class_by_name():
    shape = reflect("json:JSONEncoder")
    assert shape.short_name == "JSONEncoder"
    assert [m.name for m in shape.methods] == ["default", "encode", "iterencode"]

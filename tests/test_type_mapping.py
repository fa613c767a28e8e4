from typing import Any, Literal, Optional, Union

from jsonrpcsmd.reflection.types import annotation_to_smd, doc_type_to_smd


class Widget:
    pass


def test_annotation_to_smd_scalars():
    assert annotation_to_smd(str) == ("string", False)
    assert annotation_to_smd(int) == ("integer", False)
    assert annotation_to_smd(float) == ("number", False)
    assert annotation_to_smd(bool) == ("boolean", False)
    assert annotation_to_smd(Any) == ("any", False)
    assert annotation_to_smd(None) == ("null", True)


def test_annotation_to_smd_containers_and_classes():
    assert annotation_to_smd(list[int]) == ("array", False)
    assert annotation_to_smd(tuple) == ("array", False)
    assert annotation_to_smd(dict[str, int]) == ("object", False)
    assert annotation_to_smd(Widget) == ("object", False)
    assert annotation_to_smd(Literal["a", "b"]) == ("string", False)


def test_annotation_to_smd_optional_and_unions():
    assert annotation_to_smd(Optional[str]) == ("string", True)
    assert annotation_to_smd(int | None) == ("integer", True)
    assert annotation_to_smd(Union[int, str]) == (["integer", "string"], False)
    assert annotation_to_smd(Union[int, str, None]) == (["integer", "string"], True)


def test_doc_type_to_smd():
    assert doc_type_to_smd("int") == ("integer", False)
    assert doc_type_to_smd("string|null") == ("string", True)
    assert doc_type_to_smd("Optional[int]") == ("integer", True)
    assert doc_type_to_smd("list[str]") == ("array", False)
    assert doc_type_to_smd("mixed") == ("any", False)
    assert doc_type_to_smd("Calculator") == ("object", False)
    assert doc_type_to_smd("") == (None, False)

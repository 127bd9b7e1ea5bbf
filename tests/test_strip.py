from tscatalog.kinds import SyntaxKind
from tscatalog.strip import INTERNAL_FIELDS, strip_node


def _function_node():
    name = {"kind": SyntaxKind.IDENTIFIER, "text": "f", "pos": 9, "end": 10, "flags": 0}
    param = {
        "kind": SyntaxKind.PARAMETER,
        "pos": 11,
        "end": 20,
        "flags": 0,
        "name": {"kind": SyntaxKind.IDENTIFIER, "text": "x", "pos": 11, "end": 12},
        "type": {"kind": SyntaxKind.STRING_KEYWORD, "pos": 13, "end": 20},
    }
    node = {
        "kind": SyntaxKind.FUNCTION_DECLARATION,
        "pos": 0,
        "end": 30,
        "flags": 2,
        "modifiers": [{"kind": SyntaxKind.EXPORT_KEYWORD, "pos": 0, "end": 6}],
        "name": name,
        "parameters": [param],
        "isAsync": False,
        "arity": 1,
    }
    # Doubly linked, like a compiler tree
    for child in (name, param, param["name"], param["type"], node["modifiers"][0]):
        child["parent"] = node
    return node


def _internal_fields(node):
    found = []
    if isinstance(node, list):
        for item in node:
            found.extend(_internal_fields(item))
    elif isinstance(node, dict):
        found.extend(k for k in node if k in INTERNAL_FIELDS)
        for value in node.values():
            found.extend(_internal_fields(value))
    return found


def test_strip_removes_internal_fields_at_every_depth():
    stripped = strip_node(_function_node())

    assert _internal_fields(stripped) == []
    assert stripped["kind"] == "FunctionDeclaration"
    assert stripped["modifiers"] == [{"kind": "ExportKeyword"}]
    assert stripped["parameters"][0]["type"] == {"kind": "StringKeyword"}


def test_strip_keeps_primitives_and_list_order():
    stripped = strip_node(_function_node())

    assert stripped["isAsync"] is False
    assert stripped["arity"] == 1
    assert [p["name"]["text"] for p in stripped["parameters"]] == ["x"]


def test_strip_is_idempotent():
    once = strip_node(_function_node())
    twice = strip_node(once)

    assert twice == once


def test_strip_does_not_modify_input():
    node = _function_node()

    stripped = strip_node(node)
    stripped["name"]["text"] = "changed"

    assert node["name"]["text"] == "f"
    assert node["pos"] == 0
    assert node["name"]["parent"] is node
    assert node["kind"] == SyntaxKind.FUNCTION_DECLARATION


def test_strip_non_nodes():
    assert strip_node("text") == "text"
    assert strip_node(None) is None
    assert strip_node([{"kind": SyntaxKind.IDENTIFIER, "pos": 1}]) == [{"kind": "Identifier"}]
    # Plain objects without a kind stay kind-less
    assert strip_node({"text": "a", "end": 3}) == {"text": "a"}

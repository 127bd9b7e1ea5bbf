import pytest

from tscatalog.errors import ParseError
from tscatalog.kinds import NodeFlags, kind_name_of
from tscatalog.lang.typescript import parse_source
from tscatalog.strip import strip_node


def _kinds(nodes):
    return [kind_name_of(n) for n in nodes]


def test_source_file_shape():
    tree = parse_source("function f(a: string): void {}\nlet x = 1;\n", file_name="a.ts")

    assert kind_name_of(tree) == "SourceFile"
    assert tree["fileName"] == "a.ts"
    assert _kinds(tree["statements"]) == ["FunctionDeclaration", "VariableStatement"]

    fn = tree["statements"][0]
    assert fn["name"]["text"] == "f"
    assert fn["parent"] is tree
    assert fn["pos"] == 0 and fn["end"] > fn["pos"]
    (param,) = fn["parameters"]
    assert param["name"]["text"] == "a"
    assert kind_name_of(param["type"]) == "StringKeyword"
    assert kind_name_of(fn["type"]) == "VoidKeyword"


def test_export_modifiers():
    tree = parse_source("export function f() {}\nexport default class Base {}\n")
    fn, cls = tree["statements"]

    assert _kinds(fn["modifiers"]) == ["ExportKeyword"]
    assert kind_name_of(cls) == "ClassDeclaration"
    assert cls["name"]["text"] == "Base"
    assert _kinds(cls["modifiers"]) == ["ExportKeyword", "DefaultKeyword"]


def test_variable_types():
    tree = parse_source("const a: Foo.Bar = null, b = 1, c: Baz<number> = null;\n")
    (stmt,) = tree["statements"]
    declaration_list = stmt["declarationList"]

    assert declaration_list["flags"] & NodeFlags.CONST
    a, b, c = declaration_list["declarations"]
    qualified = a["type"]["typeName"]
    assert kind_name_of(qualified) == "QualifiedName"
    assert (qualified["left"]["text"], qualified["right"]["text"]) == ("Foo", "Bar")
    assert "type" not in b
    assert c["type"]["typeName"]["text"] == "Baz"
    assert _kinds(c["type"]["typeArguments"]) == ["NumberKeyword"]


def test_import_shapes():
    src = (
        "import React from 'react';\n"
        "import * as path from \"path\";\n"
        "import { A, B as C } from './ab';\n"
        "import 'whatwg-fetch';\n"
    )
    default, namespace, named, bare = parse_source(src)["statements"]

    assert default["importClause"]["name"]["text"] == "React"
    assert default["moduleSpecifier"]["text"] == "react"
    assert kind_name_of(namespace["importClause"]["namedBindings"]) == "NamespaceImport"
    assert namespace["importClause"]["namedBindings"]["name"]["text"] == "path"
    elements = named["importClause"]["namedBindings"]["elements"]
    assert [e["name"]["text"] for e in elements] == ["A", "C"]
    assert elements[1]["propertyName"]["text"] == "B"
    assert "importClause" not in bare
    assert bare["moduleSpecifier"]["text"] == "whatwg-fetch"


def test_namespaces_and_ambient_modules():
    src = (
        "namespace Shapes { function area() {} }\n"
        "namespace A.B { }\n"
        "declare module 'lib' { function helper(): void; }\n"
    )
    shapes, dotted, ambient = parse_source(src)["statements"]

    assert shapes["flags"] & NodeFlags.NAMESPACE
    assert shapes["name"]["text"] == "Shapes"
    assert _kinds(shapes["body"]["statements"]) == ["FunctionDeclaration"]

    assert dotted["name"]["text"] == "A"
    assert kind_name_of(dotted["body"]) == "ModuleDeclaration"
    assert dotted["body"]["name"]["text"] == "B"
    assert dotted["body"]["flags"] & NodeFlags.NESTED_NAMESPACE

    assert kind_name_of(ambient) == "ModuleDeclaration"
    assert kind_name_of(ambient["name"]) == "StringLiteral"
    assert ambient["name"]["text"] == "lib"
    assert not ambient["flags"] & NodeFlags.NAMESPACE
    assert _kinds(ambient["modifiers"]) == ["DeclareKeyword"]
    assert _kinds(ambient["body"]["statements"]) == ["FunctionDeclaration"]


def test_export_assignments():
    default, equals = parse_source("export default App;\nexport = Lib.main;\n")["statements"]

    assert kind_name_of(default) == "ExportAssignment"
    assert default["expression"]["text"] == "App"
    assert kind_name_of(equals) == "ExportAssignment"
    assert equals["isExportEquals"] is True
    assert kind_name_of(equals["expression"]) == "PropertyAccessExpression"


def test_interface_and_type_alias_members():
    src = (
        "interface LabeledValue { label: string; size?: number; get(): Foo; }\n"
        "type Point = { x: number } | null;\n"
    )
    itf, alias = parse_source(src)["statements"]

    assert _kinds(itf["members"]) == ["PropertySignature", "PropertySignature", "MethodSignature"]
    assert "questionToken" in itf["members"][1]
    assert itf["members"][2]["type"]["typeName"]["text"] == "Foo"
    assert kind_name_of(alias["type"]) == "UnionType"
    assert len(alias["type"]["types"]) == 2


def test_parsed_tree_strips_cleanly():
    tree = parse_source("export class C { private x: number; m(): void {} }\n")

    stripped = strip_node(tree)
    (cls,) = stripped["statements"]

    assert "parent" not in cls and "pos" not in cls
    assert cls["kind"] == "ClassDeclaration"
    assert [m["kind"] for m in cls["members"]] == ["PropertyDeclaration", "MethodDeclaration"]
    assert cls["members"][0]["modifiers"] == [{"kind": "PrivateKeyword"}]
    assert strip_node(stripped) == stripped


def test_syntax_errors():
    broken = "function ( {\n"

    assert kind_name_of(parse_source(broken)) == "SourceFile"
    with pytest.raises(ParseError):
        parse_source(broken, strict=True)

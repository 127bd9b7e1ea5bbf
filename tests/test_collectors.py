import pytest
from pydantic import ValidationError

from syntax_builders import (
    declaration,
    function,
    ident,
    import_clause,
    import_decl,
    named_imports,
    namespace_import,
    node,
    qualified_ref,
    type_ref,
    var_decl,
    var_statement,
)
from tscatalog.catalogue import Catalogue, ExportHook
from tscatalog.collectors import DeclarationCollector
from tscatalog.errors import UnresolvableNameError
from tscatalog.kinds import SyntaxKind, canonical_name
from tscatalog.models import DeclarationKind, ImportType


class RecordingHook(ExportHook):
    def __init__(self):
        self.calls = []

    def mark_exported(self, declaration, context):
        self.calls.append((declaration.name, context))


def _collector(**kwargs):
    catalogue = Catalogue()
    return catalogue, DeclarationCollector(catalogue, **kwargs)


@pytest.mark.parametrize(
    "method, kind, bucket",
    [
        ("collect_function", SyntaxKind.FUNCTION_DECLARATION, "functions"),
        ("collect_interface", SyntaxKind.INTERFACE_DECLARATION, "interfaces"),
        ("collect_type", SyntaxKind.TYPE_ALIAS_DECLARATION, "types"),
        ("collect_class", SyntaxKind.CLASS_DECLARATION, "classes"),
    ],
)
def test_declaration_collectors_emit_stripped_node(method, kind, bucket):
    catalogue, collector = _collector()

    getattr(collector, method)(declaration(kind, "Thing", members=[]), "mod")

    records = getattr(catalogue.context("mod"), bucket)
    assert len(records) == 1
    record = records[0]
    assert record.context == "mod"
    assert record.name == "Thing"
    assert record.exported is False
    assert record.node["name"] == {"text": "Thing"}
    assert record.node["kind"] == canonical_name(kind)
    assert "pos" not in record.node and "flags" not in record.node


def test_declaration_kinds():
    catalogue, collector = _collector()
    collector.collect_type(declaration(SyntaxKind.TYPE_ALIAS_DECLARATION, "T"), "root")
    collector.collect_class(declaration(SyntaxKind.CLASS_DECLARATION, "C"), "root")

    assert catalogue.context("root").types[0].kind == DeclarationKind.TYPE
    assert catalogue.context("root").classes[0].kind == DeclarationKind.CLASS


def test_exported_declaration_notifies_hook():
    hook = RecordingHook()
    catalogue, collector = _collector(export_hook=hook)

    collector.collect_function(function("shown", exported=True), "m")
    collector.collect_function(function("hidden"), "m")

    assert hook.calls == [("shown", "m")]
    assert [f.exported for f in catalogue.context("m").functions] == [True, False]
    # The hook records nothing on its own
    assert catalogue.context("m").exports == []


def test_unknown_modifiers_are_not_exports():
    catalogue, collector = _collector()
    fn = function("f")
    fn["modifiers"] = [node(SyntaxKind.DECORATOR), node(SyntaxKind.DECLARE_KEYWORD)]

    collector.collect_function(fn, "root")

    assert catalogue.context("root").functions[0].exported is False


def test_unnameable_declaration_raises_before_emitting():
    catalogue, collector = _collector()

    with pytest.raises(UnresolvableNameError):
        collector.collect_function(function(), "root")

    assert catalogue.by_context == {}


def test_variable_filtering_preserves_order():
    catalogue, collector = _collector()
    stmt = var_statement(
        var_decl("first", type_ref("A")),
        var_decl("untyped"),
        var_decl("third", type_ref("C")),
    )

    collector.collect_variable(stmt, "root")

    assert [v.name for v in catalogue.context("root").variables] == ["first", "third"]


def test_variable_with_keyword_type_is_skipped():
    catalogue, collector = _collector()
    stmt = var_statement(var_decl("n", node(SyntaxKind.NUMBER_KEYWORD)))

    collector.collect_variable(stmt, "root")

    assert catalogue.by_context == {}


def test_qualified_and_plain_variable_types():
    catalogue, collector = _collector()
    stmt = var_statement(var_decl("q", qualified_ref("A", "B")), var_decl("p", type_ref("C")))

    collector.collect_variable(stmt, "M")

    qualified, plain = catalogue.context("M").variables
    assert (qualified.name, qualified.value, qualified.value_context) == ("q", "B", "A")
    assert qualified.context is None
    # Plain references keep the root context even inside module M
    assert (plain.context, plain.name, plain.value) == ("root", "p", "C")
    assert plain.value_context is None


def test_plain_variable_context_follows_configured_root():
    catalogue, collector = _collector(root_context="<top>")

    collector.collect_variable(var_statement(var_decl("p", type_ref("C"))), "M")

    assert catalogue.context("M").variables[0].context == "<top>"


def test_destructured_variable_is_skipped():
    catalogue, collector = _collector()
    pattern = node(SyntaxKind.VARIABLE_DECLARATION, name=node(SyntaxKind.OBJECT_BINDING_PATTERN))
    pattern["type"] = type_ref("Props")

    collector.collect_variable(var_statement(pattern), "root")

    assert catalogue.by_context == {}


def test_export_assignment():
    catalogue, collector = _collector()
    stmt = node(SyntaxKind.EXPORT_ASSIGNMENT, expression=ident("App"))

    collector.collect_export_assignment(stmt, "root")

    (record,) = catalogue.context("root").exports
    assert record.name == "App"
    assert record.is_default is True


def test_export_assignment_without_name_is_fatal():
    _, collector = _collector()
    stmt = node(SyntaxKind.EXPORT_ASSIGNMENT, expression=node(SyntaxKind.UNKNOWN))

    with pytest.raises(UnresolvableNameError):
        collector.collect_export_assignment(stmt, "root")


def test_import_named_bindings_fan_out():
    catalogue, collector = _collector()

    collector.collect_import(import_decl("m", import_clause(bindings=named_imports("A", "B"))), "ctx")

    assert [(i.type, i.what, i.source) for i in catalogue.imports] == [
        (ImportType.EXPLICIT, "A", "m"),
        (ImportType.EXPLICIT, "B", "m"),
    ]
    # Imports are never scoped by context
    assert catalogue.by_context == {}


def test_import_default_and_namespace():
    catalogue, collector = _collector()

    collector.collect_import(import_decl("react", import_clause(name="React")), "root")
    collector.collect_import(
        import_decl("path", import_clause(bindings=namespace_import("path"))), "root"
    )

    assert [(i.type, i.what, i.source) for i in catalogue.imports] == [
        (ImportType.DEFAULT, "React", "react"),
        (ImportType.DEFAULT, "path", "path"),
    ]


def test_import_default_with_named_bindings():
    catalogue, collector = _collector()

    collector.collect_import(
        import_decl("react", import_clause(name="React", bindings=named_imports("Component"))),
        "root",
    )

    assert [(i.type, i.what) for i in catalogue.imports] == [
        (ImportType.DEFAULT, "React"),
        (ImportType.EXPLICIT, "Component"),
    ]


def test_bare_import_gets_unique_placeholder():
    catalogue, collector = _collector(import_placeholder_prefix="side$")

    collector.collect_import(import_decl("whatwg-fetch"), "root")
    collector.collect_import(import_decl("whatwg-fetch"), "root")

    first, second = catalogue.imports
    assert first.type == ImportType.DEFAULT
    assert first.source == "whatwg-fetch"
    assert first.what.startswith("side$") and len(first.what) > len("side$")
    assert first.what != second.what


def test_import_record_dumps_from_alias():
    catalogue, collector = _collector()
    collector.collect_import(import_decl("m", import_clause(name="X")), "root")

    dumped = catalogue.imports[0].model_dump(mode="json", by_alias=True)

    assert dumped == {"type": "default", "what": "X", "from": "m"}


def test_import_without_specifier_is_fatal():
    _, collector = _collector()

    with pytest.raises(UnresolvableNameError):
        collector.collect_import(node(SyntaxKind.IMPORT_DECLARATION), "root")


def test_qualified_variable_with_empty_right_side_is_rejected():
    _, collector = _collector()
    broken = qualified_ref("A", "B")
    broken["typeName"]["right"]["text"] = ""

    with pytest.raises(ValidationError):
        collector.collect_variable(var_statement(var_decl("q", broken)), "root")

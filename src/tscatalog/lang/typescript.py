from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import tree_sitter as ts
import tree_sitter_typescript as tsts

from tscatalog.errors import ParseError
from tscatalog.kinds import NodeFlags, SyntaxKind
from tscatalog.logger import logger

TS_LANGUAGE = ts.Language(tsts.language_typescript())
TSX_LANGUAGE = ts.Language(tsts.language_tsx())
_parsers: Dict[bool, ts.Parser] = {}


def _get_parser(tsx: bool = False) -> ts.Parser:
    parser = _parsers.get(tsx)
    if parser is None:
        parser = _parsers[tsx] = ts.Parser(TSX_LANGUAGE if tsx else TS_LANGUAGE)
    return parser


def get_node_text(node: Optional[ts.Node]) -> str:
    """
    Get text of the tree sitter node
    """
    if not node or not node.text:
        return ""

    return node.text.decode("utf-8")


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] in "\"'`" and text[-1] == text[0]:
        return text[1:-1]
    return text


# Modifier tokens as they appear among a declaration's children
_MODIFIER_TOKENS: Dict[str, SyntaxKind] = {
    "export": SyntaxKind.EXPORT_KEYWORD,
    "default": SyntaxKind.DEFAULT_KEYWORD,
    "declare": SyntaxKind.DECLARE_KEYWORD,
    "abstract": SyntaxKind.ABSTRACT_KEYWORD,
    "async": SyntaxKind.ASYNC_KEYWORD,
    "static": SyntaxKind.STATIC_KEYWORD,
    "readonly": SyntaxKind.READONLY_KEYWORD,
    "override": SyntaxKind.OVERRIDE_KEYWORD,
    "public": SyntaxKind.PUBLIC_KEYWORD,
    "private": SyntaxKind.PRIVATE_KEYWORD,
    "protected": SyntaxKind.PROTECTED_KEYWORD,
}

_PREDEFINED_TYPES: Dict[str, SyntaxKind] = {
    "any": SyntaxKind.ANY_KEYWORD,
    "boolean": SyntaxKind.BOOLEAN_KEYWORD,
    "never": SyntaxKind.NEVER_KEYWORD,
    "number": SyntaxKind.NUMBER_KEYWORD,
    "object": SyntaxKind.OBJECT_KEYWORD,
    "string": SyntaxKind.STRING_KEYWORD,
    "symbol": SyntaxKind.SYMBOL_KEYWORD,
    "undefined": SyntaxKind.UNDEFINED_KEYWORD,
    "unknown": SyntaxKind.UNKNOWN_KEYWORD,
    "bigint": SyntaxKind.BIG_INT_KEYWORD,
    "void": SyntaxKind.VOID_KEYWORD,
}

# Statements that carry no declaration; kept as bare kind-only nodes
_PLAIN_STATEMENTS: Dict[str, SyntaxKind] = {
    "empty_statement": SyntaxKind.EMPTY_STATEMENT,
    "if_statement": SyntaxKind.IF_STATEMENT,
    "do_statement": SyntaxKind.DO_STATEMENT,
    "while_statement": SyntaxKind.WHILE_STATEMENT,
    "for_statement": SyntaxKind.FOR_STATEMENT,
    "for_in_statement": SyntaxKind.FOR_IN_STATEMENT,
    "return_statement": SyntaxKind.RETURN_STATEMENT,
    "switch_statement": SyntaxKind.SWITCH_STATEMENT,
    "throw_statement": SyntaxKind.THROW_STATEMENT,
    "try_statement": SyntaxKind.TRY_STATEMENT,
}

Converted = Dict[str, Any]
Modifiers = List[SyntaxKind]


class TypeScriptTreeBuilder:
    """
    Converts a tree-sitter TypeScript parse tree into compiler-shaped syntax
    nodes: dicts with a numeric `kind`, kind specific fields and parser
    bookkeeping (`pos`, `end`, `flags`, `parent`).
    """

    def __init__(self, file_name: Optional[str] = None) -> None:
        self.file_name = file_name
        self._handlers: Dict[str, Callable[[ts.Node, Modifiers], List[Converted]]] = {
            "function_declaration": self._handle_function,
            "generator_function_declaration": self._handle_function,
            "function_signature": self._handle_function,
            "class_declaration": self._handle_class,
            "abstract_class_declaration": self._handle_class,
            "interface_declaration": self._handle_interface,
            "type_alias_declaration": self._handle_type_alias,
            "enum_declaration": self._handle_enum,
            "lexical_declaration": self._handle_variable_statement,
            "variable_declaration": self._handle_variable_statement,
            "import_statement": self._handle_import,
            "export_statement": self._handle_export,
            "ambient_declaration": self._handle_ambient,
            "module": self._handle_module,
            "internal_module": self._handle_module,
            "expression_statement": self._handle_expression_statement,
            "comment": lambda node, modifiers: [],
        }

    def build(self, root: ts.Node) -> Converted:
        source_file = self._make(
            SyntaxKind.SOURCE_FILE,
            root,
            fileName=self.file_name,
            statements=self._statements(root.named_children),
        )
        _link_parents(source_file, None)
        return source_file

    # --- helpers ----------------------------------------------------
    def _make(
        self,
        kind: SyntaxKind,
        node: Optional[ts.Node],
        *,
        flags: int = 0,
        **fields: Any,
    ) -> Converted:
        out: Converted = {
            "kind": int(kind),
            "pos": node.start_byte if node is not None else -1,
            "end": node.end_byte if node is not None else -1,
            "flags": int(flags),
        }
        for key, value in fields.items():
            if value is None:
                continue
            out[key] = value
        return out

    def _identifier(self, node: Optional[ts.Node], text: Optional[str] = None) -> Optional[Converted]:
        text = text if text is not None else get_node_text(node)
        if not text:
            return None
        return self._make(SyntaxKind.IDENTIFIER, node, text=text)

    def _string_literal(self, node: ts.Node) -> Converted:
        return self._make(
            SyntaxKind.STRING_LITERAL, node, text=_unquote(get_node_text(node))
        )

    def _modifiers(self, node: ts.Node, inherited: Modifiers) -> Optional[List[Converted]]:
        kinds = list(inherited)
        for child in node.children:
            kind = None
            if child.type in ("accessibility_modifier", "override_modifier"):
                kind = _MODIFIER_TOKENS.get(get_node_text(child).strip())
            elif not child.is_named:
                kind = _MODIFIER_TOKENS.get(child.type)
            if kind is not None and kind not in kinds:
                kinds.append(kind)
        if not kinds:
            return None
        return [self._make(kind, None) for kind in kinds]

    def _statements(self, nodes: Iterable[ts.Node]) -> List[Converted]:
        out: List[Converted] = []
        for node in nodes:
            out.extend(self._statement(node, []))
        return out

    def _statement(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        handler = self._handlers.get(node.type)
        if handler is not None:
            return handler(node, modifiers)
        kind = _PLAIN_STATEMENTS.get(node.type, SyntaxKind.UNKNOWN)
        if kind == SyntaxKind.UNKNOWN:
            logger.debug(
                "Unknown TypeScript statement",
                node_type=node.type,
                line=node.start_point[0] + 1,
            )
        return [self._make(kind, node)]

    def _block(self, node: Optional[ts.Node]) -> Optional[Converted]:
        if node is None:
            return None
        return self._make(
            SyntaxKind.BLOCK, node, statements=self._statements(node.named_children)
        )

    # --- names, types and expressions -------------------------------
    def _entity_name(self, node: ts.Node, text: Optional[str] = None) -> Optional[Converted]:
        """Identifier or left-nested QualifiedName built from dotted text."""
        parts = [p.strip() for p in (text or get_node_text(node)).split(".") if p.strip()]
        if not parts:
            return None
        entity = self._identifier(node, parts[0])
        for part in parts[1:]:
            entity = self._make(
                SyntaxKind.QUALIFIED_NAME,
                node,
                left=entity,
                right=self._identifier(node, part),
            )
        return entity

    def _property_name(self, node: Optional[ts.Node]) -> Optional[Converted]:
        if node is None:
            return None
        if node.type == "string":
            return self._string_literal(node)
        if node.type == "number":
            return self._make(SyntaxKind.NUMERIC_LITERAL, node, text=get_node_text(node))
        if node.type in ("property_identifier", "private_property_identifier", "identifier"):
            return self._identifier(node)
        return self._make(SyntaxKind.UNKNOWN, node)

    def _binding_name(self, node: Optional[ts.Node]) -> Optional[Converted]:
        if node is None:
            return None
        if node.type == "identifier":
            return self._identifier(node)
        if node.type == "object_pattern":
            return self._make(SyntaxKind.OBJECT_BINDING_PATTERN, node)
        if node.type == "array_pattern":
            return self._make(SyntaxKind.ARRAY_BINDING_PATTERN, node)
        if node.type == "rest_pattern" and node.named_children:
            return self._binding_name(node.named_children[0])
        return self._make(SyntaxKind.UNKNOWN, node)

    def _expression(self, node: Optional[ts.Node]) -> Optional[Converted]:
        if node is None:
            return None
        if node.type in ("identifier", "property_identifier", "type_identifier"):
            return self._identifier(node)
        if node.type == "member_expression":
            return self._make(
                SyntaxKind.PROPERTY_ACCESS_EXPRESSION,
                node,
                expression=self._expression(node.child_by_field_name("object")),
                name=self._identifier(node.child_by_field_name("property")),
            )
        if node.type == "parenthesized_expression" and node.named_children:
            return self._expression(node.named_children[0])
        if node.type == "string":
            return self._string_literal(node)
        if node.type == "number":
            return self._make(SyntaxKind.NUMERIC_LITERAL, node, text=get_node_text(node))
        return self._make(SyntaxKind.UNKNOWN, node)

    def _type(self, node: Optional[ts.Node]) -> Optional[Converted]:
        if node is None:
            return None
        if node.type in ("type_annotation", "constraint", "default_type"):
            inner = node.named_children
            return self._type(inner[0]) if inner else None
        if node.type in ("type_identifier", "identifier"):
            return self._make(
                SyntaxKind.TYPE_REFERENCE, node, typeName=self._identifier(node)
            )
        if node.type == "nested_type_identifier":
            return self._make(
                SyntaxKind.TYPE_REFERENCE, node, typeName=self._entity_name(node)
            )
        if node.type == "generic_type":
            name_node = node.child_by_field_name("name")
            args_node = node.child_by_field_name("type_arguments")
            return self._make(
                SyntaxKind.TYPE_REFERENCE,
                node,
                typeName=self._entity_name(name_node) if name_node else None,
                typeArguments=(
                    [self._type(a) for a in args_node.named_children] if args_node else None
                ),
            )
        if node.type == "predefined_type":
            kind = _PREDEFINED_TYPES.get(get_node_text(node).strip(), SyntaxKind.UNKNOWN)
            return self._make(kind, node)
        if node.type == "array_type":
            inner = node.named_children
            return self._make(
                SyntaxKind.ARRAY_TYPE,
                node,
                elementType=self._type(inner[0]) if inner else None,
            )
        if node.type in ("union_type", "intersection_type"):
            kind = (
                SyntaxKind.UNION_TYPE if node.type == "union_type" else SyntaxKind.INTERSECTION_TYPE
            )
            return self._make(
                kind, node, types=[self._type(t) for t in _flatten(node, node.type)]
            )
        if node.type == "parenthesized_type":
            inner = node.named_children
            return self._make(
                SyntaxKind.PARENTHESIZED_TYPE,
                node,
                type=self._type(inner[0]) if inner else None,
            )
        if node.type == "tuple_type":
            return self._make(
                SyntaxKind.TUPLE_TYPE,
                node,
                elements=[self._type(t) for t in node.named_children],
            )
        if node.type == "literal_type":
            inner = node.named_children
            return self._make(
                SyntaxKind.LITERAL_TYPE,
                node,
                literal=self._expression(inner[0]) if inner else None,
            )
        if node.type == "object_type":
            return self._make(
                SyntaxKind.TYPE_LITERAL, node, members=self._type_members(node)
            )
        if node.type == "function_type":
            return self._make(
                SyntaxKind.FUNCTION_TYPE,
                node,
                parameters=self._parameters(node.child_by_field_name("parameters")),
                type=self._type(node.child_by_field_name("return_type")),
            )
        return self._make(SyntaxKind.UNKNOWN, node)

    def _type_parameters(self, node: ts.Node) -> Optional[List[Converted]]:
        tp_node = node.child_by_field_name("type_parameters")
        if tp_node is None:
            return None
        out = []
        for tp in tp_node.named_children:
            if tp.type != "type_parameter":
                continue
            out.append(
                self._make(
                    SyntaxKind.TYPE_PARAMETER,
                    tp,
                    name=self._identifier(tp.child_by_field_name("name")),
                    constraint=self._type(tp.child_by_field_name("constraint")),
                )
            )
        return out

    def _parameters(self, node: Optional[ts.Node]) -> List[Converted]:
        if node is None:
            return []
        out = []
        for param in node.named_children:
            if param.type not in ("required_parameter", "optional_parameter"):
                continue
            out.append(
                self._make(
                    SyntaxKind.PARAMETER,
                    param,
                    modifiers=self._modifiers(param, []),
                    name=self._binding_name(param.child_by_field_name("pattern")),
                    questionToken=(
                        self._make(SyntaxKind.QUESTION_TOKEN, None)
                        if param.type == "optional_parameter"
                        else None
                    ),
                    type=self._type(param.child_by_field_name("type")),
                )
            )
        return out

    def _type_members(self, body: Optional[ts.Node]) -> List[Converted]:
        if body is None:
            return []
        out = []
        for member in body.named_children:
            if member.type == "comment":
                continue
            if member.type == "property_signature":
                out.append(
                    self._make(
                        SyntaxKind.PROPERTY_SIGNATURE,
                        member,
                        modifiers=self._modifiers(member, []),
                        name=self._property_name(member.child_by_field_name("name")),
                        questionToken=(
                            self._make(SyntaxKind.QUESTION_TOKEN, None)
                            if any(c.type == "?" for c in member.children)
                            else None
                        ),
                        type=self._type(member.child_by_field_name("type")),
                    )
                )
            elif member.type == "method_signature":
                out.append(
                    self._make(
                        SyntaxKind.METHOD_SIGNATURE,
                        member,
                        name=self._property_name(member.child_by_field_name("name")),
                        typeParameters=self._type_parameters(member),
                        parameters=self._parameters(member.child_by_field_name("parameters")),
                        type=self._type(member.child_by_field_name("return_type")),
                    )
                )
            else:
                out.append(self._make(SyntaxKind.UNKNOWN, member))
        return out

    def _class_members(self, body: Optional[ts.Node]) -> List[Converted]:
        if body is None:
            return []
        out = []
        for member in body.named_children:
            if member.type in ("comment", "decorator"):
                continue
            if member.type in ("method_definition", "abstract_method_signature", "method_signature"):
                name_node = member.child_by_field_name("name")
                kind = (
                    SyntaxKind.CONSTRUCTOR
                    if get_node_text(name_node) == "constructor"
                    else SyntaxKind.METHOD_DECLARATION
                )
                out.append(
                    self._make(
                        kind,
                        member,
                        modifiers=self._modifiers(member, []),
                        name=(
                            self._property_name(name_node)
                            if kind == SyntaxKind.METHOD_DECLARATION
                            else None
                        ),
                        typeParameters=self._type_parameters(member),
                        parameters=self._parameters(member.child_by_field_name("parameters")),
                        type=self._type(member.child_by_field_name("return_type")),
                        body=self._block(member.child_by_field_name("body")),
                    )
                )
            elif member.type in ("public_field_definition", "property_signature"):
                out.append(
                    self._make(
                        SyntaxKind.PROPERTY_DECLARATION,
                        member,
                        modifiers=self._modifiers(member, []),
                        name=self._property_name(member.child_by_field_name("name")),
                        type=self._type(member.child_by_field_name("type")),
                        initializer=self._expression(member.child_by_field_name("value")),
                    )
                )
            else:
                out.append(self._make(SyntaxKind.UNKNOWN, member))
        return out

    # --- statement handlers -----------------------------------------
    def _handle_function(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        return [
            self._make(
                SyntaxKind.FUNCTION_DECLARATION,
                node,
                modifiers=self._modifiers(node, modifiers),
                name=self._identifier(node.child_by_field_name("name")),
                typeParameters=self._type_parameters(node),
                parameters=self._parameters(node.child_by_field_name("parameters")),
                type=self._type(node.child_by_field_name("return_type")),
                body=self._block(node.child_by_field_name("body")),
            )
        ]

    def _handle_class(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        return [
            self._make(
                SyntaxKind.CLASS_DECLARATION,
                node,
                modifiers=self._modifiers(node, modifiers),
                name=self._identifier(node.child_by_field_name("name")),
                typeParameters=self._type_parameters(node),
                members=self._class_members(node.child_by_field_name("body")),
            )
        ]

    def _handle_interface(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        body = node.child_by_field_name("body") or next(
            (c for c in node.children if c.type in ("interface_body", "object_type")),
            None,
        )
        return [
            self._make(
                SyntaxKind.INTERFACE_DECLARATION,
                node,
                modifiers=self._modifiers(node, modifiers),
                name=self._identifier(node.child_by_field_name("name")),
                typeParameters=self._type_parameters(node),
                members=self._type_members(body),
            )
        ]

    def _handle_type_alias(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        return [
            self._make(
                SyntaxKind.TYPE_ALIAS_DECLARATION,
                node,
                modifiers=self._modifiers(node, modifiers),
                name=self._identifier(node.child_by_field_name("name")),
                typeParameters=self._type_parameters(node),
                type=self._type(node.child_by_field_name("value")),
            )
        ]

    def _handle_enum(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        return [
            self._make(
                SyntaxKind.ENUM_DECLARATION,
                node,
                modifiers=self._modifiers(node, modifiers),
                name=self._identifier(node.child_by_field_name("name")),
            )
        ]

    def _handle_variable_statement(
        self, node: ts.Node, modifiers: Modifiers
    ) -> List[Converted]:
        keyword = next((c.type for c in node.children if not c.is_named), "var")
        list_flags = NodeFlags.NONE
        if keyword == "let":
            list_flags = NodeFlags.LET
        elif keyword == "const":
            list_flags = NodeFlags.CONST

        declarations = []
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            declarations.append(
                self._make(
                    SyntaxKind.VARIABLE_DECLARATION,
                    declarator,
                    name=self._binding_name(declarator.child_by_field_name("name")),
                    type=self._type(declarator.child_by_field_name("type")),
                    initializer=self._expression(declarator.child_by_field_name("value")),
                )
            )

        declaration_list = self._make(
            SyntaxKind.VARIABLE_DECLARATION_LIST,
            node,
            flags=list_flags,
            declarations=declarations,
        )
        # `const`/`let` live on the declaration list, never among modifiers
        return [
            self._make(
                SyntaxKind.VARIABLE_STATEMENT,
                node,
                modifiers=[self._make(kind, None) for kind in modifiers] or None,
                declarationList=declaration_list,
            )
        ]

    def _handle_import(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        source = node.child_by_field_name("source") or next(
            (c for c in node.children if c.type == "string"), None
        )
        clause_node = next((c for c in node.children if c.type == "import_clause"), None)
        if source is None:
            # import x = require('y')
            return [self._make(SyntaxKind.IMPORT_EQUALS_DECLARATION, node)]

        import_clause = None
        if clause_node is not None:
            default_name = None
            named_bindings = None
            for child in clause_node.named_children:
                if child.type == "identifier":
                    default_name = self._identifier(child)
                elif child.type == "namespace_import":
                    alias = next(
                        (c for c in child.named_children if c.type == "identifier"), None
                    )
                    named_bindings = self._make(
                        SyntaxKind.NAMESPACE_IMPORT, child, name=self._identifier(alias)
                    )
                elif child.type == "named_imports":
                    named_bindings = self._make(
                        SyntaxKind.NAMED_IMPORTS,
                        child,
                        elements=[
                            self._import_specifier(spec)
                            for spec in child.named_children
                            if spec.type == "import_specifier"
                        ],
                    )
            import_clause = self._make(
                SyntaxKind.IMPORT_CLAUSE,
                clause_node,
                isTypeOnly=any(c.type == "type" for c in node.children) or None,
                name=default_name,
                namedBindings=named_bindings,
            )

        return [
            self._make(
                SyntaxKind.IMPORT_DECLARATION,
                node,
                importClause=import_clause,
                moduleSpecifier=self._string_literal(source),
            )
        ]

    def _import_specifier(self, spec: ts.Node) -> Converted:
        name_node = spec.child_by_field_name("name")
        alias_node = spec.child_by_field_name("alias")
        if alias_node is not None:
            # import { A as B }: the local binding is B
            return self._make(
                SyntaxKind.IMPORT_SPECIFIER,
                spec,
                propertyName=self._identifier(name_node),
                name=self._identifier(alias_node),
            )
        return self._make(
            SyntaxKind.IMPORT_SPECIFIER, spec, name=self._identifier(name_node)
        )

    def _handle_export(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        tokens = {c.type for c in node.children if not c.is_named}
        export_modifiers = list(modifiers) + [SyntaxKind.EXPORT_KEYWORD]
        if "default" in tokens:
            export_modifiers.append(SyntaxKind.DEFAULT_KEYWORD)

        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            return self._statement(declaration, export_modifiers)

        value = node.child_by_field_name("value")
        if value is None and "=" in tokens:
            # export = Foo;
            value = next((c for c in node.named_children if c.type != "comment"), None)
        if value is not None:
            # export default class Foo {} / function foo() {} parsed as expressions
            if value.type in ("class", "class_declaration") and value.child_by_field_name("name"):
                return self._handle_class(value, export_modifiers)
            if value.type in ("function", "function_expression", "function_declaration") and (
                value.child_by_field_name("name")
            ):
                return self._handle_function(value, export_modifiers)
            return [
                self._make(
                    SyntaxKind.EXPORT_ASSIGNMENT,
                    node,
                    isExportEquals=("=" in tokens) or None,
                    expression=self._expression(value),
                )
            ]

        source = node.child_by_field_name("source") or next(
            (c for c in node.children if c.type == "string"), None
        )
        clause = next((c for c in node.named_children if c.type == "export_clause"), None)
        export_clause = None
        if clause is not None:
            elements = []
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                name_node = spec.child_by_field_name("name")
                alias_node = spec.child_by_field_name("alias")
                elements.append(
                    self._make(
                        SyntaxKind.EXPORT_SPECIFIER,
                        spec,
                        propertyName=self._identifier(name_node) if alias_node else None,
                        name=self._identifier(alias_node or name_node),
                    )
                )
            export_clause = self._make(SyntaxKind.NAMED_EXPORTS, clause, elements=elements)
        if export_clause is None and source is None:
            # export as namespace Foo;
            return [self._make(SyntaxKind.UNKNOWN, node)]
        return [
            self._make(
                SyntaxKind.EXPORT_DECLARATION,
                node,
                exportClause=export_clause,
                moduleSpecifier=self._string_literal(source) if source else None,
            )
        ]

    def _handle_ambient(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        ambient_modifiers = list(modifiers) + [SyntaxKind.DECLARE_KEYWORD]
        if any(c.type == "global" for c in node.children):
            # declare global { ... }
            block = next((c for c in node.children if c.type == "statement_block"), None)
            return [
                self._make(
                    SyntaxKind.MODULE_DECLARATION,
                    node,
                    flags=NodeFlags.GLOBAL_AUGMENTATION,
                    modifiers=[self._make(kind, None) for kind in ambient_modifiers],
                    name=self._identifier(node, "global"),
                    body=self._module_block(block),
                )
            ]
        out: List[Converted] = []
        for child in node.named_children:
            if child.type == "comment":
                continue
            out.extend(self._statement(child, ambient_modifiers))
        return out

    def _handle_module(self, node: ts.Node, modifiers: Modifiers) -> List[Converted]:
        is_namespace = node.type == "internal_module"
        name_node = node.child_by_field_name("name")
        body = self._module_block(node.child_by_field_name("body"))
        flags = NodeFlags.NAMESPACE if is_namespace else NodeFlags.NONE

        if name_node is not None and name_node.type == "string":
            name = self._string_literal(name_node)
            return [
                self._make(
                    SyntaxKind.MODULE_DECLARATION,
                    node,
                    flags=flags,
                    modifiers=self._modifiers(node, modifiers),
                    name=name,
                    body=body,
                )
            ]

        # namespace A.B.C { } nests one declaration per segment
        parts = [p.strip() for p in get_node_text(name_node).split(".") if p.strip()]
        if not parts:
            return [self._make(SyntaxKind.UNKNOWN, node)]
        inner_flags = flags | (NodeFlags.NESTED_NAMESPACE if is_namespace else NodeFlags.NONE)
        for part in reversed(parts[1:]):
            body = self._make(
                SyntaxKind.MODULE_DECLARATION,
                node,
                flags=inner_flags,
                name=self._identifier(name_node, part),
                body=body,
            )
        return [
            self._make(
                SyntaxKind.MODULE_DECLARATION,
                node,
                flags=flags,
                modifiers=self._modifiers(node, modifiers),
                name=self._identifier(name_node, parts[0]),
                body=body,
            )
        ]

    def _module_block(self, block: Optional[ts.Node]) -> Optional[Converted]:
        if block is None:
            return None
        return self._make(
            SyntaxKind.MODULE_BLOCK, block, statements=self._statements(block.named_children)
        )

    def _handle_expression_statement(
        self, node: ts.Node, modifiers: Modifiers
    ) -> List[Converted]:
        inner = [c for c in node.named_children if c.type != "comment"]
        # Older grammars parse a top-level `namespace X {}` as an expression
        if len(inner) == 1 and inner[0].type in ("internal_module", "module"):
            return self._handle_module(inner[0], modifiers)
        return [
            self._make(
                SyntaxKind.EXPRESSION_STATEMENT,
                node,
                expression=self._expression(inner[0]) if inner else None,
            )
        ]


def _flatten(node: ts.Node, node_type: str) -> List[ts.Node]:
    """Flatten left-nested binary type nodes such as `A | B | C`."""
    out: List[ts.Node] = []
    for child in node.named_children:
        if child.type == node_type:
            out.extend(_flatten(child, node_type))
        else:
            out.append(child)
    return out


def _link_parents(node: Any, parent: Optional[Converted]) -> None:
    if isinstance(node, list):
        for item in node:
            _link_parents(item, parent)
        return
    if not isinstance(node, dict):
        return
    if parent is not None:
        node["parent"] = parent
    for key, value in list(node.items()):
        if key == "parent":
            continue
        _link_parents(value, node)


def parse_source(
    source: Union[str, bytes],
    *,
    tsx: bool = False,
    file_name: Optional[str] = None,
    strict: bool = False,
) -> Converted:
    """
    Parse TypeScript source into a `SourceFile` syntax node.
    """
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    tree = _get_parser(tsx).parse(source_bytes)
    root = tree.root_node
    if root.has_error:
        if strict:
            raise ParseError(f"Syntax errors in {file_name or '<source>'}")
        logger.warning("Source has syntax errors", path=file_name)
    return TypeScriptTreeBuilder(file_name=file_name).build(root)

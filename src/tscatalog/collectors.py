import uuid
from typing import Any, Optional

from tscatalog.catalogue import AbstractCatalogueSink, ExportHook, NullExportHook
from tscatalog.errors import UnresolvableNameError
from tscatalog.kinds import KindNameTable
from tscatalog.logger import logger
from tscatalog.models import (
    Declaration,
    DeclarationKind,
    ExportRecord,
    ImportRecord,
    ImportType,
    ModifierKind,
    VariableDeclaration,
    modifier_kinds,
)
from tscatalog.names import entity_name_text, identifier_text, resolve_name
from tscatalog.strip import strip_node


class DeclarationCollector:
    """
    Shapes top-level syntax nodes into catalogue records and pushes them to
    the sink. One `collect_*` method per declaration kind.
    """

    def __init__(
        self,
        sink: AbstractCatalogueSink,
        *,
        export_hook: Optional[ExportHook] = None,
        kind_table: Optional[KindNameTable] = None,
        root_context: str = "root",
        import_placeholder_prefix: str = "npm$import$",
    ) -> None:
        self.sink = sink
        self.export_hook = export_hook or NullExportHook()
        self.kind_table = kind_table
        self.root_context = root_context
        self.import_placeholder_prefix = import_placeholder_prefix

    # --- helpers ----------------------------------------------------
    def _strip(self, node: Any) -> Any:
        return strip_node(node, self.kind_table)

    def _make_declaration(
        self, node: dict[str, Any], context: str, kind: DeclarationKind
    ) -> Declaration:
        stripped = self._strip(node)
        name = resolve_name(stripped)
        stripped["name"] = {"text": name}
        exported = ModifierKind.EXPORT in modifier_kinds(stripped)
        decl = Declaration(
            context=context, kind=kind, name=name, exported=exported, node=stripped
        )
        if exported:
            self.export_hook.mark_exported(decl, context)
        return decl

    def _placeholder_name(self) -> str:
        return f"{self.import_placeholder_prefix}{uuid.uuid4().hex}"

    # --- collectors -------------------------------------------------
    def collect_function(self, node: dict[str, Any], context: str) -> None:
        self.sink.push_function(
            self._make_declaration(node, context, DeclarationKind.FUNCTION), context
        )

    def collect_interface(self, node: dict[str, Any], context: str) -> None:
        self.sink.push_interface(
            self._make_declaration(node, context, DeclarationKind.INTERFACE), context
        )

    def collect_type(self, node: dict[str, Any], context: str) -> None:
        self.sink.push_type(
            self._make_declaration(node, context, DeclarationKind.TYPE), context
        )

    def collect_class(self, node: dict[str, Any], context: str) -> None:
        self.sink.push_class(
            self._make_declaration(node, context, DeclarationKind.CLASS), context
        )

    def collect_variable(self, node: dict[str, Any], context: str) -> None:
        stripped = self._strip(node)
        declarations = (stripped.get("declarationList") or {}).get("declarations") or []

        variables: list[VariableDeclaration] = []
        for declaration in declarations:
            type_name = (declaration.get("type") or {}).get("typeName")
            if not type_name:
                logger.debug(
                    "Skipping variable without a type reference",
                    context=context,
                    name=identifier_text(declaration.get("name")),
                )
                continue

            name = identifier_text(declaration.get("name"))
            if not name:
                # Binding patterns declare no single name
                logger.debug(
                    "Skipping destructured variable",
                    context=context,
                    pattern=(declaration.get("name") or {}).get("kind"),
                )
                continue

            left, right = type_name.get("left"), type_name.get("right")
            if left and right:
                variables.append(
                    VariableDeclaration(
                        name=name,
                        value=identifier_text(right) or "",
                        value_context=entity_name_text(left),
                    )
                )
            else:
                variables.append(
                    VariableDeclaration(
                        context=self.root_context,
                        name=name,
                        value=entity_name_text(type_name) or "",
                    )
                )

        for variable in variables:
            self.sink.push_variable(variable, context)

    def collect_export_assignment(self, node: dict[str, Any], context: str) -> None:
        stripped = self._strip(node)
        name = entity_name_text(stripped.get("expression"))
        if not name:
            logger.error(
                "Unable to resolve exported expression name",
                context=context,
                node=stripped,
            )
            raise UnresolvableNameError(stripped)
        self.sink.push_export(ExportRecord(name=name, is_default=True), context)

    def collect_import(self, node: dict[str, Any], context: str) -> None:
        # Imports are catalogue-wide; `context` is not recorded
        stripped = self._strip(node)
        source = resolve_name(stripped)
        clause = stripped.get("importClause")

        # import 'whatwg-fetch'
        if not clause:
            self.sink.push_import(
                ImportRecord(
                    type=ImportType.DEFAULT, what=self._placeholder_name(), source=source
                )
            )
            return

        # import React from 'react'
        default_name = identifier_text(clause.get("name"))
        if default_name:
            self.sink.push_import(
                ImportRecord(type=ImportType.DEFAULT, what=default_name, source=source)
            )

        bindings = clause.get("namedBindings")
        if not bindings:
            return

        # import * as React from 'react'
        namespace_name = identifier_text(bindings.get("name"))
        if namespace_name:
            self.sink.push_import(
                ImportRecord(type=ImportType.DEFAULT, what=namespace_name, source=source)
            )
            return

        # import { Component } from 'react'
        for element in bindings.get("elements") or []:
            self.sink.push_import(
                ImportRecord(
                    type=ImportType.EXPLICIT,
                    what=resolve_name(element),
                    source=source,
                )
            )

from typing import Any, Callable, Optional

from tscatalog.catalogue import AbstractCatalogueSink, Catalogue, ExportHook
from tscatalog.collectors import DeclarationCollector
from tscatalog.errors import SyntaxTreeError, UnresolvableNameError
from tscatalog.kinds import DEFAULT_KIND_TABLE, KindNameTable, kind_name_of
from tscatalog.logger import logger
from tscatalog.names import identifier_text
from tscatalog.settings import ExtractorSettings

Handler = Callable[[dict[str, Any], str], None]


class TreeWalker:
    """
    Walks the statement list of a syntax tree and dispatches every statement
    to the collector registered for its kind. Module and namespace bodies are
    walked recursively under a new context. Statements of other kinds are
    skipped. Any error raised while collecting aborts the whole walk.
    """

    def __init__(
        self,
        sink: AbstractCatalogueSink,
        *,
        settings: Optional[ExtractorSettings] = None,
        export_hook: Optional[ExportHook] = None,
        kind_table: Optional[KindNameTable] = None,
    ) -> None:
        self.sink = sink
        self.settings = settings or ExtractorSettings()
        if kind_table is None:
            kind_table = (
                KindNameTable.load(self.settings.kind_table_path)
                if self.settings.kind_table_path
                else DEFAULT_KIND_TABLE
            )
        self.kind_table = kind_table
        self.collector = DeclarationCollector(
            sink,
            export_hook=export_hook,
            kind_table=kind_table,
            root_context=self.settings.root_context,
            import_placeholder_prefix=self.settings.import_placeholder_prefix,
        )
        self._handlers: dict[str, Handler] = {
            "ModuleDeclaration": self._walk_module,
            "FunctionDeclaration": self.collector.collect_function,
            "InterfaceDeclaration": self.collector.collect_interface,
            "TypeAliasDeclaration": self.collector.collect_type,
            "ClassDeclaration": self.collector.collect_class,
            "VariableStatement": self.collector.collect_variable,
            "ExportAssignment": self.collector.collect_export_assignment,
            "ImportDeclaration": self.collector.collect_import,
        }

    def walk(self, tree: dict[str, Any], context: Optional[str] = None) -> AbstractCatalogueSink:
        if context is None:
            context = self.settings.root_context

        statements = tree.get("statements") if isinstance(tree, dict) else None
        if not isinstance(statements, list):
            raise SyntaxTreeError(
                f"Expected a node with a statement list, got {kind_name_of(tree, self.kind_table)}"
            )

        for node in statements:
            kind = kind_name_of(node, self.kind_table)
            handler = self._handlers.get(kind) if kind else None
            if handler is None:
                logger.debug("Skipping statement", kind=kind, context=context)
                continue
            handler(node, context)

        return self.sink

    def _walk_module(self, node: dict[str, Any], context: str) -> None:
        name = identifier_text(node.get("name"))
        if not name:
            logger.error("Module declaration without a name", context=context)
            raise UnresolvableNameError(node)

        if (node.get("flags") or 0) & self.settings.namespace_flags:
            self.sink.push_namespace(name)
            # Fake module scoped to the namespace
            inner_context = f"{self.settings.namespace_context_prefix}{name}"
        else:
            inner_context = name

        body = node.get("body")
        if not body:
            # declare module 'foo';
            return

        logger.debug("Entering module body", module=name, context=inner_context)
        if kind_name_of(body, self.kind_table) == "ModuleDeclaration":
            # namespace A.B { ... }
            self.walk({"statements": [body]}, inner_context)
        else:
            self.walk(body, inner_context)


def walk_tree(
    tree: dict[str, Any],
    context: Optional[str] = None,
    *,
    sink: Optional[AbstractCatalogueSink] = None,
    settings: Optional[ExtractorSettings] = None,
    export_hook: Optional[ExportHook] = None,
    kind_table: Optional[KindNameTable] = None,
) -> AbstractCatalogueSink:
    """
    Walk *tree* into *sink* (a new `Catalogue` when omitted) and return the sink.
    """
    walker = TreeWalker(
        sink if sink is not None else Catalogue(),
        settings=settings,
        export_hook=export_hook,
        kind_table=kind_table,
    )
    return walker.walk(tree, context)

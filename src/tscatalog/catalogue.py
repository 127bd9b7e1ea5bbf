from abc import ABC, abstractmethod
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from tscatalog.models import (
    Declaration,
    ExportRecord,
    ImportRecord,
    VariableDeclaration,
)


class AbstractCatalogueSink(ABC):
    """
    Receives the records produced by a walk. Every method is fire-and-forget
    from the walker's point of view.
    """

    @abstractmethod
    def push_function(self, record: Declaration, context: str) -> None: ...

    @abstractmethod
    def push_interface(self, record: Declaration, context: str) -> None: ...

    @abstractmethod
    def push_type(self, record: Declaration, context: str) -> None: ...

    @abstractmethod
    def push_class(self, record: Declaration, context: str) -> None: ...

    @abstractmethod
    def push_variable(self, record: VariableDeclaration, context: str) -> None: ...

    @abstractmethod
    def push_namespace(self, name: str) -> None: ...

    @abstractmethod
    def push_export(self, record: ExportRecord, context: str) -> None: ...

    @abstractmethod
    def push_import(self, record: ImportRecord) -> None: ...


class ExportHook(ABC):
    """
    Extension point notified for every declaration carrying an `export`
    modifier. How named exports should be recorded is left to the caller.
    """

    @abstractmethod
    def mark_exported(self, declaration: Declaration, context: str) -> None: ...


class NullExportHook(ExportHook):
    def mark_exported(self, declaration: Declaration, context: str) -> None:
        return


class ContextCatalogue(BaseModel):
    """Declarations recorded under a single module or namespace context."""

    functions: List[Declaration] = Field(default_factory=list)
    interfaces: List[Declaration] = Field(default_factory=list)
    types: List[Declaration] = Field(default_factory=list)
    classes: List[Declaration] = Field(default_factory=list)
    variables: List[VariableDeclaration] = Field(default_factory=list)
    exports: List[ExportRecord] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.functions
            or self.interfaces
            or self.types
            or self.classes
            or self.variables
            or self.exports
        )


class Catalogue(AbstractCatalogueSink):
    """
    In-memory sink. Declarations are grouped by the context they were pushed
    with; namespaces and imports are catalogue-wide.
    """

    def __init__(self) -> None:
        self.by_context: Dict[str, ContextCatalogue] = {}
        self.namespaces: List[str] = []
        self.imports: List[ImportRecord] = []

    def context(self, name: str) -> ContextCatalogue:
        bucket = self.by_context.get(name)
        if bucket is None:
            bucket = self.by_context[name] = ContextCatalogue()
        return bucket

    def contexts(self) -> List[str]:
        return list(self.by_context.keys())

    def push_function(self, record: Declaration, context: str) -> None:
        self.context(context).functions.append(record)

    def push_interface(self, record: Declaration, context: str) -> None:
        self.context(context).interfaces.append(record)

    def push_type(self, record: Declaration, context: str) -> None:
        self.context(context).types.append(record)

    def push_class(self, record: Declaration, context: str) -> None:
        self.context(context).classes.append(record)

    def push_variable(self, record: VariableDeclaration, context: str) -> None:
        self.context(context).variables.append(record)

    def push_namespace(self, name: str) -> None:
        if name not in self.namespaces:
            self.namespaces.append(name)

    def push_export(self, record: ExportRecord, context: str) -> None:
        self.context(context).exports.append(record)

    def push_import(self, record: ImportRecord) -> None:
        self.imports.append(record)

    def to_dict(self, include_nodes: bool = True) -> dict[str, Any]:
        exclude = None
        if not include_nodes:
            exclude = {
                field: {"__all__": {"node"}}
                for field in ("functions", "interfaces", "types", "classes")
            }
        return {
            "contexts": {
                name: bucket.model_dump(mode="json", exclude=exclude)
                for name, bucket in self.by_context.items()
            },
            "namespaces": list(self.namespaces),
            "imports": [
                imp.model_dump(mode="json", by_alias=True) for imp in self.imports
            ],
        }

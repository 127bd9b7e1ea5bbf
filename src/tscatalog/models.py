from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from typing import Any, Dict, Optional

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class DeclarationKind(str, Enum):
    FUNCTION = "function"
    INTERFACE = "interface"
    TYPE = "type"
    CLASS = "class"
    VARIABLE = "variable"


class ModifierKind(str, Enum):
    # Values are canonical syntax kind names of modifier keywords
    EXPORT = "ExportKeyword"
    DEFAULT = "DefaultKeyword"
    DECLARE = "DeclareKeyword"
    CONST = "ConstKeyword"
    ABSTRACT = "AbstractKeyword"
    ASYNC = "AsyncKeyword"
    PUBLIC = "PublicKeyword"
    PRIVATE = "PrivateKeyword"
    PROTECTED = "ProtectedKeyword"
    STATIC = "StaticKeyword"
    READONLY = "ReadonlyKeyword"
    OVERRIDE = "OverrideKeyword"

    @classmethod
    def from_node(cls, node: Any) -> Optional["ModifierKind"]:
        """Map a stripped modifier node to a member, None for anything else (e.g. decorators)."""
        if not isinstance(node, dict):
            return None
        try:
            return cls(node.get("kind"))
        except ValueError:
            return None


def modifier_kinds(node: Dict[str, Any]) -> set[ModifierKind]:
    found = (ModifierKind.from_node(m) for m in node.get("modifiers") or [])
    return {m for m in found if m is not None}


class ImportType(str, Enum):
    DEFAULT = "default"
    EXPLICIT = "explicit"


# ---------------------------------------------------------------------------
# Catalogue records
# ---------------------------------------------------------------------------


class Declaration(BaseModel):
    """
    A function, interface, type alias or class. `node` is the whole stripped
    syntax node, with `node["name"] == {"text": name}`.
    """

    context: str
    kind: DeclarationKind
    name: str = Field(min_length=1)
    exported: bool = False
    node: Dict[str, Any] = Field(default_factory=dict, repr=False)


class VariableDeclaration(BaseModel):
    # Set to the root context for plain type references only; qualified
    # references carry `value_context` instead.
    context: Optional[str] = None
    name: str = Field(min_length=1)
    value: str = Field(min_length=1)
    value_context: Optional[str] = None

    @property
    def kind(self) -> DeclarationKind:
        return DeclarationKind.VARIABLE


class ImportRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: ImportType
    what: str = Field(min_length=1)
    source: str = Field(alias="from", min_length=1)


class ExportRecord(BaseModel):
    name: str = Field(min_length=1)
    is_default: bool

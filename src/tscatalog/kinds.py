import json
from enum import IntEnum, IntFlag
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union


class SyntaxKind(IntEnum):
    """
    Numeric kind tags understood by the walker and produced by the bundled
    tree-sitter front end. Trees coming from another producer can use their
    own numbering by loading a `KindNameTable` for it.
    """

    UNKNOWN = 0
    END_OF_FILE_TOKEN = 1
    NUMERIC_LITERAL = 9
    STRING_LITERAL = 11
    QUESTION_TOKEN = 58
    IDENTIFIER = 80
    CONST_KEYWORD = 87
    DEFAULT_KEYWORD = 90
    EXPORT_KEYWORD = 95
    NULL_KEYWORD = 106
    VOID_KEYWORD = 116
    PRIVATE_KEYWORD = 123
    PROTECTED_KEYWORD = 124
    PUBLIC_KEYWORD = 125
    STATIC_KEYWORD = 126
    ABSTRACT_KEYWORD = 128
    ANY_KEYWORD = 133
    ASYNC_KEYWORD = 134
    BOOLEAN_KEYWORD = 136
    DECLARE_KEYWORD = 138
    NEVER_KEYWORD = 146
    READONLY_KEYWORD = 148
    NUMBER_KEYWORD = 150
    OBJECT_KEYWORD = 151
    STRING_KEYWORD = 154
    SYMBOL_KEYWORD = 155
    UNDEFINED_KEYWORD = 157
    UNKNOWN_KEYWORD = 159
    BIG_INT_KEYWORD = 163
    OVERRIDE_KEYWORD = 164
    QUALIFIED_NAME = 166
    TYPE_PARAMETER = 168
    PARAMETER = 169
    DECORATOR = 170
    PROPERTY_SIGNATURE = 171
    PROPERTY_DECLARATION = 172
    METHOD_SIGNATURE = 173
    METHOD_DECLARATION = 174
    CONSTRUCTOR = 176
    TYPE_REFERENCE = 183
    FUNCTION_TYPE = 184
    TYPE_LITERAL = 187
    ARRAY_TYPE = 188
    TUPLE_TYPE = 189
    UNION_TYPE = 192
    INTERSECTION_TYPE = 193
    PARENTHESIZED_TYPE = 196
    LITERAL_TYPE = 201
    OBJECT_BINDING_PATTERN = 206
    ARRAY_BINDING_PATTERN = 207
    PROPERTY_ACCESS_EXPRESSION = 211
    EXPRESSION_WITH_TYPE_ARGUMENTS = 233
    BLOCK = 241
    EMPTY_STATEMENT = 242
    VARIABLE_STATEMENT = 243
    EXPRESSION_STATEMENT = 244
    IF_STATEMENT = 245
    DO_STATEMENT = 246
    WHILE_STATEMENT = 247
    FOR_STATEMENT = 248
    FOR_IN_STATEMENT = 249
    RETURN_STATEMENT = 253
    SWITCH_STATEMENT = 255
    THROW_STATEMENT = 257
    TRY_STATEMENT = 258
    VARIABLE_DECLARATION = 260
    VARIABLE_DECLARATION_LIST = 261
    FUNCTION_DECLARATION = 262
    CLASS_DECLARATION = 263
    INTERFACE_DECLARATION = 264
    TYPE_ALIAS_DECLARATION = 265
    ENUM_DECLARATION = 266
    MODULE_DECLARATION = 267
    MODULE_BLOCK = 268
    IMPORT_EQUALS_DECLARATION = 271
    IMPORT_DECLARATION = 272
    IMPORT_CLAUSE = 273
    NAMESPACE_IMPORT = 274
    NAMED_IMPORTS = 275
    IMPORT_SPECIFIER = 276
    EXPORT_ASSIGNMENT = 277
    EXPORT_DECLARATION = 278
    NAMED_EXPORTS = 279
    NAMESPACE_EXPORT = 280
    EXPORT_SPECIFIER = 281
    HERITAGE_CLAUSE = 298
    SOURCE_FILE = 312


class NodeFlags(IntFlag):
    NONE = 0
    LET = 1 << 0
    CONST = 1 << 1
    NESTED_NAMESPACE = 1 << 3
    SYNTHESIZED = 1 << 4
    NAMESPACE = 1 << 5
    EXPORT_CONTEXT = 1 << 7
    GLOBAL_AUGMENTATION = 1 << 10


UNKNOWN_KIND_NAME = "Unknown"

KindTag = Union[int, str, None]


def canonical_name(kind: SyntaxKind) -> str:
    """`FUNCTION_DECLARATION` -> `FunctionDeclaration`."""
    return "".join(part.capitalize() for part in kind.name.split("_"))


class KindNameTable:
    """
    Maps a parser's numeric kind tags to stable, human readable names.
    """

    def __init__(self, names: Mapping[int, str]) -> None:
        self._names: Dict[int, str] = dict(names)

    @classmethod
    def default(cls) -> "KindNameTable":
        return cls({int(kind): canonical_name(kind) for kind in SyntaxKind})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "KindNameTable":
        """
        Build a table from a JSON object. Accepts `{"262": "FunctionDeclaration"}`,
        `{"FunctionDeclaration": 262}` or both directions mixed, which is what
        `JSON.stringify(ts.SyntaxKind)` produces. Range markers such as
        `FirstKeyword` alias real kinds and are never used as names.
        """
        names: Dict[int, str] = {}
        reverse: Dict[int, str] = {}
        for key, value in data.items():
            if isinstance(value, int) and not isinstance(value, bool):
                if _is_range_marker(key):
                    continue
                names.setdefault(value, key)
            elif isinstance(value, str) and str(key).lstrip("-").isdigit():
                if _is_range_marker(value):
                    continue
                reverse.setdefault(int(key), value)
        for tag, name in reverse.items():
            names.setdefault(tag, name)
        return cls(names)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "KindNameTable":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"kind table {path} must be a JSON object")
        return cls.from_mapping(data)

    def name_of(self, kind: KindTag) -> Optional[str]:
        if kind is None:
            return None
        # Already canonical, e.g. a stripped node
        if isinstance(kind, str):
            return kind
        return self._names.get(int(kind), UNKNOWN_KIND_NAME)

    def __contains__(self, kind: int) -> bool:
        return kind in self._names

    def __len__(self) -> int:
        return len(self._names)


def _is_range_marker(name: str) -> bool:
    return name.startswith("First") or name.startswith("Last")


DEFAULT_KIND_TABLE = KindNameTable.default()


def kind_name_of(node: Any, table: Optional[KindNameTable] = None) -> Optional[str]:
    """
    Return the canonical kind name of a syntax node, or None for values
    that carry no kind.
    """
    if not isinstance(node, dict):
        return None
    return (table or DEFAULT_KIND_TABLE).name_of(node.get("kind"))

from typing import Any, Optional


class ExtractionError(Exception):
    """Base class for errors that abort a declaration walk."""


class UnresolvableNameError(ExtractionError):
    """
    A declaration node has no declared name, no type-reference name and no
    module specifier. The offending (stripped) node is kept on `node`.
    """

    def __init__(self, node: Any, message: Optional[str] = None) -> None:
        kind = node.get("kind") if isinstance(node, dict) else None
        super().__init__(message or f"Unable to resolve a name for {kind or 'node'}")
        self.node = node


class SyntaxTreeError(ExtractionError):
    """The walked tree (or a module body) has no statement list."""


class ParseError(ExtractionError):
    """The front end could not produce a syntax tree for a source file."""

from typing import Any, Optional

from tscatalog.errors import UnresolvableNameError
from tscatalog.logger import logger


def identifier_text(node: Any) -> Optional[str]:
    """
    Text of an identifier or string literal node. Compiler JSON dumps only
    carry `escapedText` on identifiers, so it is accepted as well.
    """
    if not isinstance(node, dict):
        return None
    return node.get("text") or node.get("escapedText") or None


def entity_name_text(node: Any) -> Optional[str]:
    """
    Render an entity name: `Foo` for identifiers, `A.B` for qualified names
    and property access expressions.
    """
    text = identifier_text(node)
    if text:
        return text
    if not isinstance(node, dict):
        return None
    # QualifiedName
    if node.get("left") and node.get("right"):
        left = entity_name_text(node["left"])
        right = entity_name_text(node["right"])
        if left and right:
            return f"{left}.{right}"
    # PropertyAccessExpression
    if node.get("expression") and node.get("name"):
        left = entity_name_text(node["expression"])
        right = entity_name_text(node["name"])
        if left and right:
            return f"{left}.{right}"
    return None


def resolve_name(node: dict[str, Any]) -> str:
    """
    Derive the identifier of a declaration. Tries, in order: the declared
    name, the name of its type reference, its module specifier.

    Raises UnresolvableNameError when none of them is present; a placeholder
    name would corrupt every consumer indexing declarations by name.
    """
    name = identifier_text(node.get("name"))
    if name:
        return name

    type_node = node.get("type")
    if isinstance(type_node, dict) and type_node.get("typeName"):
        name = entity_name_text(type_node["typeName"])
        if name:
            return name

    name = identifier_text(node.get("moduleSpecifier"))
    if name:
        return name

    logger.error("Unable to resolve declaration name", kind=node.get("kind"), node=node)
    raise UnresolvableNameError(node)

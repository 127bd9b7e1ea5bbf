from typing import Any, Optional

from tscatalog.kinds import KindNameTable, kind_name_of

# Parser bookkeeping: source offsets, parent back-reference, internal flags
INTERNAL_FIELDS = frozenset({"pos", "end", "parent", "flags"})


def strip_node(node: Any, table: Optional[KindNameTable] = None) -> Any:
    """
    Return a deep copy of *node* without parser bookkeeping fields, with every
    `kind` tag replaced by its canonical name.

    Lists are stripped element-wise, primitives are returned unchanged. The
    input is never modified. Internal fields are dropped before descending,
    so the `parent` back-reference of a doubly linked tree is never followed.
    Stripping an already stripped node returns an equal copy.
    """
    if isinstance(node, (list, tuple)):
        return [strip_node(item, table) for item in node]
    if not isinstance(node, dict):
        return node

    kept = {key: value for key, value in node.items() if key not in INTERNAL_FIELDS}
    clone = {key: strip_node(value, table) for key, value in kept.items()}

    # Use actual names instead of kind ids
    if "kind" in clone:
        clone["kind"] = kind_name_of(clone, table)

    return clone

from tscatalog.catalogue import (
    AbstractCatalogueSink,
    Catalogue,
    ExportHook,
    NullExportHook,
)
from tscatalog.errors import (
    ExtractionError,
    ParseError,
    SyntaxTreeError,
    UnresolvableNameError,
)
from tscatalog.extract import extract_file, extract_source
from tscatalog.names import resolve_name
from tscatalog.settings import ExtractorSettings, load_settings
from tscatalog.strip import strip_node
from tscatalog.walker import TreeWalker, walk_tree

__all__ = [
    "AbstractCatalogueSink",
    "Catalogue",
    "ExportHook",
    "NullExportHook",
    "ExtractionError",
    "ParseError",
    "SyntaxTreeError",
    "UnresolvableNameError",
    "ExtractorSettings",
    "load_settings",
    "extract_file",
    "extract_source",
    "resolve_name",
    "strip_node",
    "TreeWalker",
    "walk_tree",
]

from pathlib import Path
from typing import Optional, Union

from tscatalog.catalogue import AbstractCatalogueSink, Catalogue, ExportHook
from tscatalog.lang.typescript import parse_source
from tscatalog.logger import logger
from tscatalog.settings import ExtractorSettings
from tscatalog.walker import TreeWalker


def extract_source(
    source: Union[str, bytes],
    *,
    settings: Optional[ExtractorSettings] = None,
    sink: Optional[AbstractCatalogueSink] = None,
    export_hook: Optional[ExportHook] = None,
    module: Optional[str] = None,
    file_name: Optional[str] = None,
    tsx: Optional[bool] = None,
) -> AbstractCatalogueSink:
    """
    Parse TypeScript *source* and walk it into *sink* (a new `Catalogue` by
    default). Top-level declarations are recorded under *module*, or the
    configured root context.
    """
    settings = settings or ExtractorSettings()
    tree = parse_source(
        source,
        tsx=settings.tsx if tsx is None else tsx,
        file_name=file_name,
        strict=settings.strict,
    )
    walker = TreeWalker(
        sink if sink is not None else Catalogue(),
        settings=settings,
        export_hook=export_hook,
    )
    return walker.walk(tree, module)


def extract_file(
    path: Union[str, Path],
    *,
    settings: Optional[ExtractorSettings] = None,
    sink: Optional[AbstractCatalogueSink] = None,
    export_hook: Optional[ExportHook] = None,
    module: Optional[str] = None,
) -> AbstractCatalogueSink:
    path = Path(path)
    with open(path, "rb") as file:
        source = file.read()
    logger.debug("Extracting declarations", path=str(path), module=module)
    return extract_source(
        source,
        settings=settings,
        sink=sink,
        export_hook=export_hook,
        module=module,
        file_name=str(path),
        tsx=True if path.suffix == ".tsx" else None,
    )

import json
from pathlib import Path
from typing import Optional, Tuple

import click

from tscatalog.catalogue import Catalogue
from tscatalog.errors import ExtractionError
from tscatalog.extract import extract_file
from tscatalog.logger import logger, setup_logging
from tscatalog.settings import load_settings


def _summary(path: Path, catalogue: Catalogue) -> str:
    lines = [f"{path}:"]
    for name, bucket in catalogue.by_context.items():
        counts = ", ".join(
            f"{field}={len(getattr(bucket, field))}"
            for field in ("functions", "interfaces", "types", "classes", "variables", "exports")
            if getattr(bucket, field)
        )
        lines.append(f"  [{name}] {counts}")
    if catalogue.namespaces:
        lines.append(f"  namespaces: {', '.join(catalogue.namespaces)}")
    for imp in catalogue.imports:
        lines.append(f"  import {imp.type.value} {imp.what} from {imp.source}")
    return "\n".join(lines)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path),
)
@click.option(
    "--module",
    type=str,
    default=None,
    help="Context of top-level declarations (default: the configured root context).",
)
@click.option("--tsx/--no-tsx", default=False, help="Parse with the TSX grammar.")
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the catalogue of each file as JSON.",
)
@click.option(
    "--nodes/--no-nodes",
    default=False,
    help="Include stripped syntax nodes in JSON output.",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug logging.",
)
def main(
    files: Tuple[Path, ...],
    module: Optional[str],
    tsx: bool,
    as_json: bool,
    nodes: bool,
    debug: bool,
) -> None:
    """
    Extract the declaration catalogue of TypeScript source files.
    """
    setup_logging(debug)
    settings = load_settings(tsx=tsx)

    failed = 0
    results = {}
    for path in files:
        try:
            catalogue = extract_file(path, settings=settings, module=module)
        except (ExtractionError, ValueError) as ex:
            # One broken file must not stop the others
            failed += 1
            logger.error("Extraction failed", path=str(path), error=str(ex))
            continue

        assert isinstance(catalogue, Catalogue)
        if as_json:
            results[str(path)] = catalogue.to_dict(include_nodes=nodes)
        else:
            click.echo(_summary(path, catalogue))

    if as_json:
        click.echo(json.dumps(results, indent=2))

    raise SystemExit(1 if failed else 0)


if __name__ == "__main__":
    main()

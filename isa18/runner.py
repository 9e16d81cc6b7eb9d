from __future__ import annotations

import sys
from pathlib import Path

from isa18.assembler import assemble
from isa18.formats import FormatRegistry
from isa18.writer import format_binary, format_octal

OUTPUT_FORMATS = ("octal", "binary")


def _format_listing(lines, output_format: str) -> str:
    rows = []
    for line in lines:
        rendered = line.word.to_octal() if output_format == "octal" else line.word.to_binary()
        rows.append(f"{line.line_no:>4}  {rendered}  {line.text}")
    return "\n".join(rows)


def run_source(
    source: str,
    *,
    label: str | None = None,
    registry: FormatRegistry | None = None,
    output_format: str = "octal",
    listing: bool = False,
) -> int:
    result = assemble(source, registry)

    print("=== Assembly Result ===")
    print(result.format_diagnostics(label))
    print()

    if result.has_errors():
        print("Build failed due to errors above.")
        return 1

    print("=== Words ===")
    if listing:
        print(_format_listing(result.lines, output_format))
    elif output_format == "binary":
        print(format_binary(result.words))
    else:
        print(format_octal(result.words))
    return 0


def run_file(
    path: Path | str,
    *,
    registry_path: Path | str | None = None,
    output_format: str = "octal",
    listing: bool = False,
) -> int:
    path = Path(path).expanduser()

    if not path.exists():
        print(f"error: file '{path}' not found", file=sys.stderr)
        return 1

    if not path.is_file():
        print(f"error: '{path}' is not a file", file=sys.stderr)
        return 1

    try:
        source = path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        print(f"error: failed to read '{path}': {e}", file=sys.stderr)
        return 1

    registry = None
    if registry_path is not None:
        try:
            registry = FormatRegistry.from_json(registry_path)
        except (OSError, ValueError) as e:
            print(f"error: failed to load registry '{registry_path}': {e}", file=sys.stderr)
            return 1

    return run_source(
        source,
        label=str(path),
        registry=registry,
        output_format=output_format,
        listing=listing,
    )

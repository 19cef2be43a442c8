"""Writes finalized snippets as a Rust module directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from ..shared import OutputWriteError, sanitize_module_name
from .generator import GeneratorContext, Snippet, _get_default_context, finalize

logger = logging.getLogger(__name__)

MOD_FILE = "mod.rs"


@dataclass(frozen=True, slots=True)
class ModuleSpec:
    """Specification for a generated module."""

    module_name: str
    identifier: str


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(f"Failed to write file: {e}", str(path)) from e


def _write_mod_file(
    modules: Iterable[ModuleSpec],
    mod_path: Path,
    ctx: GeneratorContext,
) -> None:
    """Write the mod.rs file for the generated modules."""
    dedup: dict[str, ModuleSpec] = {}
    for spec in modules:
        dedup[spec.module_name] = spec

    ordered = sorted(dedup.values(), key=lambda item: item.module_name)
    rendered = ctx.mod_template.render(modules=ordered)
    _write_text(mod_path, rendered)


def write_snippets(
    snippets: Sequence[Snippet],
    output_dir: Path,
    context: GeneratorContext | None = None,
) -> list[Path]:
    """Write each snippet to ``<module>.rs`` plus a ``mod.rs`` index.

    Snippets not yet finalized are finalized here first.

    Returns:
        Paths of the written snippet files, in snippet order.

    Raises:
        OutputWriteError: If the directory or a file cannot be written.
    """
    ctx = context or _get_default_context()
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(f"Failed to create output directory: {e}", str(output_dir)) from e

    file_template = ctx.file_template
    written: list[Path] = []
    modules: list[ModuleSpec] = []

    for snippet in snippets:
        if not snippet.finalized:
            snippet = finalize(snippet, ctx)
        module_name = sanitize_module_name(snippet.id)
        path = output_dir / f"{module_name}.rs"
        _write_text(path, file_template.render(code=snippet.code))
        logger.debug("Wrote %s", path)
        written.append(path)
        modules.append(ModuleSpec(module_name=module_name, identifier=snippet.identifier))

    _write_mod_file(modules, output_dir / MOD_FILE, ctx)
    logger.info("Wrote %d module(s) to %s", len(written), output_dir)
    return written

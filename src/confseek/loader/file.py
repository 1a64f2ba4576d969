"""Loading a single config file."""

from __future__ import annotations

import json
from contextlib import suppress
from pathlib import Path
from typing import Any

from confseek.common import create_logger
from confseek.dualmode import Body, call_hook, dualmode
from confseek.fs import read_text, unlink, write_text
from confseek.settings import get_settings

from .evaluators import evaluate, get_evaluator
from .interop import interop_default
from .models import LoadConfigResult, LoadConfigSource
from .parsers import DATA_PARSERS, parser_for_suffix
from .protocol import Evaluator

logger = create_logger("loader")


@dualmode
def load_config_file(
    filepath: Path,
    source: LoadConfigSource,
    *,
    evaluator: Evaluator | None = None,
) -> Body[LoadConfigResult[Any] | None]:
    """Load one config file as described by ``source``.

    Returns ``None`` when the file produces no value or its rewrite hook rejects it.
    Errors propagate unless ``source.skip_on_error`` is set.
    """
    filepath = Path(filepath)
    parser = source.parser
    bundle_path = filepath
    code: str | None = None
    config: Any = None
    dependencies: list[Path] | None = None

    def read() -> Body[str]:
        nonlocal code
        if code is None:
            code = yield from read_text(filepath)
        return code

    logger.debug("Loading config file", path=str(filepath))

    try:
        if source.transform is not None:
            transformed = yield from call_hook(source.transform, (yield from read()), filepath)
            if transformed:
                bundle_path = filepath.with_name(f"{get_settings().loader.temp_prefix}{filepath.name}")
                yield from write_text(bundle_path, transformed)
                logger.debug("Wrote transformed config", path=str(filepath), bundle_path=str(bundle_path))
                code = transformed

        if parser == "auto":
            parser = parser_for_suffix(filepath) or "json"
            if parser == "json":
                try:
                    config = json.loads((yield from read()))
                except ValueError:
                    parser = "code"

        if config is None:
            if callable(parser):
                config = yield from call_hook(parser, filepath)
            elif parser == "code":
                evaluation = yield from evaluate(evaluator or get_evaluator(), bundle_path)
                config = interop_default(evaluation.module)
                if evaluation.dependencies is not None:
                    dependencies = [filepath if dep == bundle_path else dep for dep in evaluation.dependencies]
            else:
                config = DATA_PARSERS[parser]((yield from read()))

        if config is None:
            logger.debug("Config file produced no value", path=str(filepath), parser=str(parser))
            return None

        rewritten = config
        if source.rewrite is not None:
            rewritten = yield from call_hook(source.rewrite, config, filepath)

        if rewritten is None or rewritten is False:
            logger.debug("Config file rejected by rewrite", path=str(filepath))
            return None

        return LoadConfigResult(config=rewritten, sources=[filepath], dependencies=dependencies)
    except Exception as exc:
        if source.skip_on_error:
            logger.warning("Skipping config file after error", path=str(filepath), error=repr(exc))
            return None
        exc.add_note(f"while loading config file {filepath}")
        raise
    finally:
        if bundle_path != filepath:
            with suppress(OSError):
                yield from unlink(bundle_path)
                logger.debug("Removed transformed config", bundle_path=str(bundle_path))

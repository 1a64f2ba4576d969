"""Finding, loading and merging config files from several sources."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from confseek.common import create_logger
from confseek.dualmode import Body, dualmode
from confseek.fs import FindUpOptions, find_up

from .evaluators import get_evaluator
from .file import load_config_file
from .merger import apply_defaults
from .models import LoadConfigOptions, LoadConfigResult, LoadConfigSource
from .protocol import Evaluator

logger = create_logger("loader")

type MatchedFiles = list[tuple[LoadConfigSource, list[Path]]]


class ConfigLoader[T]:
    """Loads config for one set of sources, caching the file search between loads.

    One loader is meant to be driven by one caller at a time: ``find_configs`` replaces
    the cached matches in place.
    """

    def __init__(self, options: LoadConfigOptions, *, evaluator: Evaluator | None = None) -> None:
        self.options = options
        self.cwd = options.cwd if options.cwd is not None else Path.cwd()
        self._evaluator = evaluator
        self._matched: MatchedFiles | None = None
        self._results: list[LoadConfigResult[Any]] = []

    @property
    def matched(self) -> MatchedFiles | None:
        """Files found by the last search, per source; ``None`` before the first search."""
        return self._matched

    @dualmode
    def find_configs(self) -> Body[list[Path]]:
        """Search every source and cache the matches. Returns all matched files."""
        if self._matched is None:
            self._matched = []
        self._matched.clear()

        search = FindUpOptions(cwd=self.cwd, stop_at=self.options.stop_at, multiple=self.options.merge)
        for source in self.options.sources:
            files = yield from find_up(source.candidates(), search)
            logger.debug("Source matched", files=[str(file) for file in files], candidates=source.files)
            self._matched.append((source, files))

        return [file for _, files in self._matched for file in files]

    @dualmode
    def load(self, force: bool = False) -> Body[LoadConfigResult[T]]:
        """Load the config, searching again only when nothing is cached or ``force`` is set."""
        if self._matched is None or force:
            yield from self.find_configs()
        assert self._matched is not None

        matched_files = [file for _, files in self._matched for file in files]
        evaluator = self._evaluator or get_evaluator()
        self._results = []

        for source, files in self._matched:
            if not files:
                continue

            if not self.options.merge:
                result = yield from load_config_file(files[0], source, evaluator=evaluator)
                if result is not None:
                    logger.debug("Config loaded", sources=[str(path) for path in result.sources])
                    return LoadConfigResult(
                        config=apply_defaults(result.config, self.options.defaults),
                        sources=result.sources,
                        dependencies=result.dependencies,
                        matched_files=matched_files,
                    )
            else:
                for file in files:
                    result = yield from load_config_file(file, source, evaluator=evaluator)
                    if result is not None:
                        self._results.append(result)

        if not self._results:
            logger.debug("No config loaded, using defaults", matched=len(matched_files))
            return LoadConfigResult(config=self.options.defaults, sources=[], matched_files=matched_files)

        logger.debug("Merged configs", sources=[str(path) for r in self._results for path in r.sources])
        return LoadConfigResult(
            config=apply_defaults(*(result.config for result in self._results), self.options.defaults),
            sources=[path for result in self._results for path in result.sources],
            dependencies=[path for result in self._results for path in result.dependencies or []],
            matched_files=matched_files,
        )


def create_config_loader[T](
    options: LoadConfigOptions | None = None,
    /,
    *,
    evaluator: Evaluator | None = None,
    **kwargs: Any,
) -> ConfigLoader[T]:
    """Create a loader from an options object or from keyword options."""
    if options is None:
        options = LoadConfigOptions.model_validate(kwargs)
    elif kwargs:
        options = LoadConfigOptions.model_validate({**dict(options), **kwargs})
    return ConfigLoader(options, evaluator=evaluator)


@dualmode
def load_config(
    options: LoadConfigOptions | None = None,
    /,
    *,
    evaluator: Evaluator | None = None,
    **kwargs: Any,
) -> Body[LoadConfigResult[Any]]:
    """Create a loader and load once."""
    return (yield from create_config_loader(options, evaluator=evaluator, **kwargs).load())


load_config_sync = load_config.sync

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from confseek.dualmode import Body, dualmode
from confseek.loader import loader as loader_module
from confseek.loader.loader import ConfigLoader, create_config_loader, load_config, load_config_sync
from confseek.loader.models import LoadConfigOptions, LoadConfigSource


def _write(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project directory whose parent is the search boundary."""
    root = tmp_path / "project"
    root.mkdir()
    return root


def _loader(project: Path, sources: list[LoadConfigSource], **kwargs: object) -> ConfigLoader[object]:
    return create_config_loader(sources=sources, cwd=project, stop_at=project.parent, **kwargs)


def _counting_parser(name: str, calls: list[str], value: object) -> object:
    def parse(path: Path) -> object:
        calls.append(name)
        return value

    return parse


def test_json_round_trip(project: Path) -> None:
    path = _write(project / "app.json", {"a": 1})

    result = _loader(project, [LoadConfigSource(files="app", parser="auto")]).load.sync()

    assert result.config == {"a": 1}
    assert result.sources == [path]
    assert result.dependencies is None


def test_first_successful_source_wins(project: Path) -> None:
    calls: list[str] = []
    _write(project / "one.json", "{}")
    _write(project / "two.json", "{}")
    _write(project / "three.json", "{}")
    sources = [
        LoadConfigSource(files="missing", parser=_counting_parser("missing", calls, {"x": 0})),
        LoadConfigSource(files="one", parser=_counting_parser("one", calls, None)),
        LoadConfigSource(files="two", parser=_counting_parser("two", calls, {"x": 2})),
        LoadConfigSource(files="three", parser=_counting_parser("three", calls, {"x": 3})),
    ]

    result = _loader(project, sources).load.sync()

    assert result.config == {"x": 2}
    assert result.sources == [project / "two.json"]
    assert calls == ["one", "two"]


def test_only_first_match_of_a_source_is_tried(project: Path) -> None:
    calls: list[str] = []
    _write(project / "app.json", "{}")
    _write(project / "app.toml", "")
    source = LoadConfigSource(files="app", extensions=["json", "toml"], parser=_counting_parser("app", calls, None))

    result = _loader(project, [source], defaults={"fallback": True}).load.sync()

    assert calls == ["app"]
    assert result.config == {"fallback": True}
    assert result.sources == []


def test_defaults_fill_missing_keys(project: Path) -> None:
    path = _write(project / "defaults.config.json", {"port": 3000})
    sources = [
        LoadConfigSource(files="nothing.config"),
        LoadConfigSource(files="defaults.config"),
    ]

    result = _loader(project, sources, defaults={"port": 8080, "host": "local"}).load.sync()

    assert result.config == {"port": 3000, "host": "local"}
    assert result.sources == [path]


def test_merge_accumulates_in_source_then_directory_order(project: Path) -> None:
    nested = project / "pkg" / "sub"
    near = _write(nested / "app.json", {"x": 1, "plugins": ["near"]})
    empty = _write(nested / "app.yaml", "")
    far = _write(project / "app.json", {"x": 2, "y": 2, "plugins": ["far", "more"], "server": {"port": 1}})
    other = _write(nested / "other.toml", "z = 3\n[server]\nhost = 'h'\n")
    sources = [LoadConfigSource(files="app"), LoadConfigSource(files="other")]

    loader = create_config_loader(
        sources=sources, cwd=nested, stop_at=project.parent, merge=True, defaults={"w": 0, "x": -1}
    )
    result = loader.load.sync()

    assert result.sources == [near, far, other]
    assert result.matched_files == [near, empty, far, other]
    assert result.config == {
        "x": 1,
        "y": 2,
        "z": 3,
        "w": 0,
        "plugins": ["near"],
        "server": {"port": 1, "host": "h"},
    }
    assert result.dependencies == []


def test_merge_with_nothing_loaded_returns_defaults(project: Path) -> None:
    _write(project / "app.json", "null")

    result = _loader(project, [LoadConfigSource(files="app")], merge=True, defaults={"d": 1}).load.sync()

    assert result.config == {"d": 1}
    assert result.sources == []
    assert result.matched_files == [project / "app.json"]


def test_reloading_in_merge_mode_does_not_duplicate(project: Path) -> None:
    _write(project / "app.json", {"a": 1})
    loader = _loader(project, [LoadConfigSource(files="app")], merge=True)

    first = loader.load.sync()
    second = loader.load.sync()

    assert first.sources == second.sources == [project / "app.json"]


def test_no_files_distinguished_from_rejected_files(project: Path) -> None:
    nothing = _loader(project, [LoadConfigSource(files="app")], defaults={"d": 1}).load.sync()

    _write(project / "app.json", {"kind": "other"})
    rejected = _loader(
        project,
        [LoadConfigSource(files="app", rewrite=lambda config, path: None)],
        defaults={"d": 1},
    ).load.sync()

    assert nothing.config == rejected.config == {"d": 1}
    assert nothing.matched_files == []
    assert rejected.matched_files == [project / "app.json"]


@pytest.fixture
def search_calls(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    calls: list[list[str]] = []
    original = loader_module.find_up

    @dualmode
    def counting_find_up(paths, options=None) -> Body[list[Path]]:  # noqa: ANN001
        calls.append(list(paths))
        return (yield from original(paths, options))

    monkeypatch.setattr(loader_module, "find_up", counting_find_up)
    return calls


def test_matches_are_cached_until_forced(project: Path, search_calls: list[list[str]]) -> None:
    _write(project / "app.json", {"v": 1})
    loader = _loader(project, [LoadConfigSource(files="app")])

    assert loader.load.sync().config == {"v": 1}
    _write(project / "app.toml", "v = 2\n")
    (project / "app.json").unlink()

    with pytest.raises(FileNotFoundError):
        loader.load.sync()
    assert len(search_calls) == 1

    assert loader.load.sync(force=True).config == {"v": 2}
    assert len(search_calls) == 2


def test_find_configs_replaces_cached_matches(project: Path) -> None:
    loader = _loader(project, [LoadConfigSource(files="app"), LoadConfigSource(files="extra")])
    assert loader.matched is None

    assert loader.find_configs.sync() == []
    path = _write(project / "extra.json", {})

    assert loader.find_configs.sync() == [path]
    assert [files for _, files in loader.matched] == [[], [path]]


def test_parser_errors_propagate(project: Path) -> None:
    _write(project / "app.json", "{}")

    def explode(path: Path) -> object:
        raise RuntimeError("parser failed")

    loader = _loader(project, [LoadConfigSource(files="app", parser=explode)], defaults={"d": 1})

    with pytest.raises(RuntimeError, match="parser failed"):
        loader.load.sync()
    with pytest.raises(RuntimeError, match="parser failed"):
        asyncio.run(loader.load.async_())


def test_skip_on_error_falls_through_to_defaults(project: Path) -> None:
    _write(project / "app.json", "{}")

    def explode(path: Path) -> object:
        raise RuntimeError("parser failed")

    loader = _loader(
        project,
        [LoadConfigSource(files="app", parser=explode, skip_on_error=True)],
        defaults={"d": 1},
    )

    assert loader.load.sync().config == {"d": 1}


def test_transform_temp_file_is_cleaned_up_through_loader(project: Path) -> None:
    _write(project / "app.conf", "port: 1\n")
    source = LoadConfigSource(
        files="app.conf",
        extensions=[],
        parser="code",
        transform=lambda text, path: text.replace(":", " ="),
    )

    result = _loader(project, [source]).load.sync()

    assert result.config == {"port": 1}
    assert sorted(p.name for p in project.iterdir()) == ["app.conf"]


def test_async_and_lazy_forms(project: Path) -> None:
    _write(project / "app.json", {"a": 1})
    options = LoadConfigOptions(sources=[LoadConfigSource(files="app")], cwd=project, stop_at=project.parent)

    async def main() -> tuple[object, object]:
        awaited = await load_config.async_(options)
        lazy = await load_config(options)
        return awaited.config, lazy.config

    assert asyncio.run(main()) == ({"a": 1}, {"a": 1})
    assert load_config_sync(options).config == {"a": 1}


def test_keyword_options_override_options_object(project: Path) -> None:
    _write(project / "app.json", {"a": 1})
    options = LoadConfigOptions(sources=[LoadConfigSource(files="app")], cwd=project, stop_at=project.parent)

    result = load_config.sync(options, defaults={"b": 2})

    assert result.config == {"a": 1, "b": 2}


def test_cwd_defaults_to_process_directory(project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(project / "app.json", {"a": 1})
    monkeypatch.chdir(project)

    loader = create_config_loader(sources=[LoadConfigSource(files="app")], stop_at=project.parent)

    assert loader.cwd == Path.cwd()
    assert loader.load.sync().config == {"a": 1}

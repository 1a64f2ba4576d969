from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from confseek.errors import UnknownParserError
from confseek.loader.models import LoadConfigOptions, LoadConfigSource


def test_candidates_expand_names_by_extensions() -> None:
    source = LoadConfigSource(files=["app.config", "app"], extensions=["json", ".toml", ""])

    assert source.candidates() == ["app.config.json", "app.config.toml", "app.config", "app.json", "app.toml", "app"]


def test_empty_extensions_use_names_verbatim() -> None:
    source = LoadConfigSource(files="setup.cfg", extensions=[])

    assert source.candidates() == ["setup.cfg"]


def test_default_extensions_come_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from confseek.settings import reset_settings

    assert LoadConfigSource(files="app").extensions == ("py", "json", "toml", "yaml", "yml", "")

    monkeypatch.setenv("CONFSEEK_LOADER__DEFAULT_EXTENSIONS", '["json"]')
    reset_settings()

    assert LoadConfigSource(files="app").candidates() == ["app.json"]


def test_single_path_file_is_accepted() -> None:
    assert LoadConfigSource(files=Path("nested/app")).files == (str(Path("nested/app")),)


@pytest.mark.parametrize(("given", "expected"), [("import", "code"), ("YAML", "yaml"), ("yml", "yaml"), ("auto", "auto")])
def test_parser_names_are_normalized(given: str, expected: str) -> None:
    assert LoadConfigSource(files="app", parser=given).parser == expected


def test_unknown_parser_is_rejected() -> None:
    with pytest.raises(ValidationError) as info:
        LoadConfigSource(files="app", parser="xml")

    assert "Unknown parser 'xml'" in str(info.value)
    assert isinstance(UnknownParserError("xml", ("json",)), ValueError)


def test_callable_parser_is_kept() -> None:
    def parse(path: Path) -> dict[str, str]:
        return {"path": str(path)}

    assert LoadConfigSource(files="app", parser=parse).parser is parse


def test_sources_are_frozen() -> None:
    source = LoadConfigSource(files="app")

    with pytest.raises(ValidationError):
        source.skip_on_error = True  # type: ignore[misc]


def test_options_accept_a_single_source() -> None:
    source = LoadConfigSource(files="app")

    assert LoadConfigOptions(sources=source).sources == (source,)
    assert LoadConfigOptions(sources={"files": ["other"]}).sources[0].files == ("other",)
    assert LoadConfigOptions(sources=None).sources == ()


def test_options_forbid_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        LoadConfigOptions(sources=[], recursive=True)  # type: ignore[call-arg]

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal

import typer
import yaml

from confseek.loader import LoadConfigOptions, LoadConfigResult, LoadConfigSource, create_config_loader

NamesArgument = Annotated[list[str], typer.Argument(help="Config base names to search for, strongest first.")]
ExtensionOption = Annotated[
    list[str] | None,
    typer.Option("--ext", "-e", help="Extension to try for each name (repeatable). Defaults to the built-in list."),
]
CwdOption = Annotated[Path | None, typer.Option("--cwd", help="Directory to start searching from.")]
StopAtOption = Annotated[Path | None, typer.Option("--stop-at", help="Ancestor directory the search never reaches.")]
MergeOption = Annotated[bool, typer.Option("--merge", help="Load and merge every matching file.")]
ParserOption = Annotated[str, typer.Option("--parser", "-p", help="auto, json, yaml, toml or code.")]
SkipErrorsOption = Annotated[bool, typer.Option("--skip-errors", help="Skip files that fail to load.")]
FormatOption = Annotated[
    Literal["yaml", "json"],
    typer.Option("--format", "-f", show_default=True, case_sensitive=False, help="Output format (yaml or json)."),
]

app = typer.Typer(help="Find and inspect config files.")


@app.callback(invoke_without_command=True)
def _config_root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("find")
def find(
    names: NamesArgument,
    ext: ExtensionOption = None,
    cwd: CwdOption = None,
    stop_at: StopAtOption = None,
    merge: MergeOption = False,
) -> None:
    """Print the config files that would be considered, strongest first."""
    loader = create_config_loader(_build_options(names, ext, cwd, stop_at, merge, "auto", False))
    for path in loader.find_configs.sync():
        typer.echo(str(path))


@app.command("show")
def show(
    names: NamesArgument,
    ext: ExtensionOption = None,
    cwd: CwdOption = None,
    stop_at: StopAtOption = None,
    merge: MergeOption = False,
    parser: ParserOption = "auto",
    skip_errors: SkipErrorsOption = False,
    format: FormatOption = "yaml",
) -> None:
    """Load the config and print it together with the files it came from."""
    try:
        options = _build_options(names, ext, cwd, stop_at, merge, parser, skip_errors)
        result = create_config_loader(options).load.sync()
    except Exception as exc:  # noqa: BLE001 - reported to the user
        _handle_error(exc)
        raise typer.Exit(code=1) from exc

    typer.echo(_format_payload(_to_payload(result), format.lower()))


def _build_options(
    names: list[str],
    extensions: list[str] | None,
    cwd: Path | None,
    stop_at: Path | None,
    merge: bool,
    parser: str,
    skip_errors: bool,
) -> LoadConfigOptions:
    source: dict[str, Any] = {"files": names, "parser": parser, "skip_on_error": skip_errors}
    if extensions is not None:
        source["extensions"] = extensions
    return LoadConfigOptions(
        sources=(LoadConfigSource.model_validate(source),),
        cwd=cwd,
        stop_at=stop_at,
        merge=merge,
    )


def _to_payload(result: LoadConfigResult[Any]) -> dict[str, Any]:
    payload = {
        "config": result.config,
        "sources": [str(path) for path in result.sources],
        "dependencies": [str(path) for path in result.dependencies or []],
    }
    # Round-trip through JSON so values from code configs become plain data.
    return json.loads(json.dumps(payload, default=str))


def _format_payload(payload: dict[str, Any], format: str) -> str:
    if format == "json":
        return json.dumps(payload, indent=2, sort_keys=True)
    return yaml.safe_dump(payload, sort_keys=True)


def _handle_error(error: Exception) -> None:
    message = f"[{type(error).__name__}] {error}"
    notes = getattr(error, "__notes__", None)
    if notes:
        message = f"{message} ({'; '.join(notes)})"
    typer.secho(message, err=True, fg=typer.colors.RED)

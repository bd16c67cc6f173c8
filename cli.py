# cli.py
import asyncio
import json
import logging
import logging.config
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from backend.core.errors import AdToolError, OperationAborted
from plugins.core_assets.models import AssetCategory
from plugins.core_assets.pipeline import Base64Pipeline
from plugins.core_assets.service import AssetService, summarize
from plugins.core_config_editor.service import ConfigEditorService
from plugins.core_logging import load_logging_config
from plugins.core_projects.registry import ProjectRegistry
from plugins.core_projects.service import ProjectService
from plugins.core_storage.locks import PathLocks
from plugins.core_storage.service import LocalFileSystem

app = typer.Typer(name="adtool", help="Playable Ad Asset Studio command-line interface")
config_app = typer.Typer(name="config", help="Read and edit a project's exported config object.")
app.add_typer(config_app)


class _Services:
    """The same services the HTTP app wires through its container, built directly."""
    def __init__(self):
        locks = PathLocks()
        self.projects = ProjectService(file_system=LocalFileSystem(), registry=ProjectRegistry())
        self.assets = AssetService(pipeline=Base64Pipeline(path_locks=locks))
        self.config = ConfigEditorService(project_service=self.projects, path_locks=locks)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show info and debug logs.")):
    load_dotenv()
    logging_config = load_logging_config()
    # stdout carries command output (possibly JSON)
    logging_config["handlers"]["console"]["stream"] = "ext://sys.stderr"
    logging.config.dictConfig(logging_config)
    if not verbose:
        logging.disable(logging.INFO)


def _run(coro):
    """Runs one command; known failures become a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except OperationAborted:
        raise typer.Exit(code=0)
    except AdToolError as e:
        typer.secho(f"Error: {e.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("scan")
def scan(
    project_root: Path = typer.Argument(..., help="Root folder of the playable-ad project."),
    unused: bool = typer.Option(True, "--unused/--used-only", help="Include assets no loader call consumes."),
    category: Optional[AssetCategory] = typer.Option(None, "--category", "-c", help="Only list this category."),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON."),
):
    """
    Lists every asset with its base64 module and whether the preloader uses it.
    """
    async def _scan():
        services = _Services()
        project = await services.projects.open_project(str(project_root))
        return await services.assets.scan(project)

    records = _run(_scan())
    visible = [
        r for r in records
        if (unused or r.in_use) and (category is None or r.category == category)
    ]

    if as_json:
        typer.echo(json.dumps([r.model_dump(mode="json") for r in visible], indent=2, ensure_ascii=False))
        return

    for record in visible:
        used = typer.style("used  ", fg=typer.colors.GREEN) if record.in_use else typer.style("unused", fg=typer.colors.YELLOW)
        base64 = "base64" if record.has_base64 else typer.style("no-b64", fg=typer.colors.RED)
        typer.echo(f"{used}  {base64}  {record.category.value:<5}  {record.relative_path}")

    summary = summarize(records)
    typer.echo(
        f"\n{summary.total} asset(s), {summary.in_use} in use, "
        f"{summary.missing_base64} without a base64 module."
    )


@app.command("replace")
def replace(
    project_root: Path = typer.Argument(..., help="Root folder of the playable-ad project."),
    asset_path: str = typer.Argument(..., help="Asset path relative to public/assets."),
    new_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Replacement file."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """
    Overwrites an asset with a new file of the same category and regenerates its base64 module.
    """
    async def _replace():
        services = _Services()
        project = await services.projects.open_project(str(project_root))
        if not yes and not typer.confirm(f"Replace '{asset_path}' with '{new_file.name}'?"):
            raise OperationAborted()
        return await services.assets.replace(project, asset_path, new_file.read_bytes(), new_file.name)

    result = _run(_replace())
    typer.secho(
        f"Replaced '{asset_path}'. Module media/{result.module_path} exports "
        f"'{result.export_identifier}' ({result.mime_type}).",
        fg=typer.colors.GREEN,
    )


@config_app.command("show")
def config_show(
    project_root: Path = typer.Argument(..., help="Root folder of the playable-ad project."),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Config module relative to the project root."),
):
    """Prints the exported config object as JSON."""
    async def _show():
        services = _Services()
        project = await services.projects.open_project(str(project_root))
        return await services.config.read(project, file)

    document = _run(_show())
    typer.echo(f"// export {document.export_kind} {document.export_identifier}")
    typer.echo(json.dumps(document.value, indent=2, ensure_ascii=False))


@config_app.command("set")
def config_set(
    project_root: Path = typer.Argument(..., help="Root folder of the playable-ad project."),
    key_path: str = typer.Argument(..., help="Dotted key path, e.g. 'audio.volume' or 'levels.0.name'."),
    value: str = typer.Argument(..., help="New value as JSON; anything that is not valid JSON is taken as a string."),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Config module relative to the project root."),
):
    """Sets one value in the config object and saves the module."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    async def _set():
        services = _Services()
        project = await services.projects.open_project(str(project_root))
        return await services.config.rewrite(project, {key_path: parsed}, file)

    _run(_set())
    typer.secho(f"Set '{key_path}' = {json.dumps(parsed, ensure_ascii=False)}.", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()

"""
Config command group for managing configuration.
"""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from git_workflow.api.cli.output_formatter import OutputFormat, OutputFormatter
from git_workflow.config.settings import WorkflowSettings

console = Console()
app = typer.Typer(help="Manage configuration")


def _config_path(ctx: typer.Context) -> Path:
    root = ctx.find_root()
    options = root.obj if isinstance(root.obj, dict) else {}
    config = options.get("config")
    return Path(config) if config else WorkflowSettings.get_config_path()


def complete_config_keys(incomplete: str):
    """Auto-complete configuration keys."""
    return [key for key in WorkflowSettings.model_fields if key.startswith(incomplete)]


@app.command("show")
def show_config(
    ctx: typer.Context,
    output_format: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output", "-o",
        help="Output format"
    ),
):
    """
    Show the effective configuration (config file + environment).

    Examples:
        git-workflow config show
        git-workflow config show --output yaml
    """
    settings = WorkflowSettings.load_from_file(_config_path(ctx))
    config_data = settings.model_dump(mode="json")

    if output_format == OutputFormat.TABLE:
        table = Table(title="git-workflow Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")
        table.add_column("Description", style="dim")

        for field_name, field_info in WorkflowSettings.model_fields.items():
            value = config_data.get(field_name, "")
            if isinstance(value, list):
                value = ", ".join(str(item) for item in value)
            table.add_row(field_name, str(value), field_info.description or "")

        console.print(table)
    else:
        OutputFormatter.format_data(config_data, output_format, "git-workflow Configuration")


@app.command("set")
def set_config(
    ctx: typer.Context,
    key: str = typer.Argument(
        help="Configuration key",
        autocompletion=complete_config_keys
    ),
    value: str = typer.Argument(help="Configuration value"),
):
    """
    Set a configuration value and save it to the config file.

    Examples:
        git-workflow config set production_branch master
        git-workflow config set bug_source release
        git-workflow config set protected_branches development,main,master,staging
    """
    config_path = _config_path(ctx)
    settings = WorkflowSettings.load_from_file(config_path)

    if key not in WorkflowSettings.model_fields:
        console.print(f"[red]Error: Unknown configuration key '{key}'[/red]")
        console.print("Available keys:")
        for field_name in WorkflowSettings.model_fields.keys():
            console.print(f"  - {field_name}")
        raise typer.Exit(1)

    field_type = WorkflowSettings.model_fields[key].annotation
    if hasattr(field_type, '__origin__') and field_type.__origin__ is list:
        converted_value = [item.strip() for item in value.split(",") if item.strip()]
    else:
        converted_value = value

    try:
        settings.update_setting(key, converted_value, config_path=config_path)
    except ValidationError as e:
        console.print(f"[red]Error: Invalid value '{value}' for {key}: {e.errors()[0]['msg']}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Set {key} = {settings.model_dump(mode='json')[key]}[/green]")


@app.command("path")
def config_path(ctx: typer.Context):
    """Print the configuration file path."""
    console.print(str(_config_path(ctx)), soft_wrap=True, highlight=False)

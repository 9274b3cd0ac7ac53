"""Tagging commands."""

import typer

from git_workflow.api.cli.output_formatter import OutputFormat, OutputFormatter
from git_workflow.api.cli.runner import run_workflow


def register(app: typer.Typer) -> None:
    @app.command("tag", rich_help_panel="Tagging")
    def tag(ctx: typer.Context):
        """Interactively create an annotated tag and push it."""
        run_workflow(ctx, lambda service: service.create_tag())

    @app.command("tags", rich_help_panel="Tagging")
    def tags(
        ctx: typer.Context,
        output_format: OutputFormat = typer.Option(OutputFormat.TEXT, "--output", "-o", help="Output format"),
    ):
        """List all tags."""
        result = run_workflow(ctx, lambda service: service.list_tags())
        OutputFormatter.format_tag_list(result, output_format)

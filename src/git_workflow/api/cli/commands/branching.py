"""Branching commands - create, list and switch branches."""

from typing import List, Optional

import typer

from git_workflow.api.cli.output_formatter import OutputFormat, OutputFormatter
from git_workflow.api.cli.runner import run_workflow
from git_workflow.core.domain.models import BranchType

WORDS_HELP = "Branch name words; joined with hyphens (no type prefix)"


def _create(ctx: typer.Context, branch_type: BranchType, words: Optional[List[str]]) -> None:
    run_workflow(ctx, lambda service: service.create_branch(branch_type, words or []))


def register(app: typer.Typer) -> None:
    """Register branching commands on the main app."""

    @app.command("feature", rich_help_panel="Branching")
    def feature(ctx: typer.Context, words: Optional[List[str]] = typer.Argument(None, help=WORDS_HELP)):
        """Create feature/<name> from development."""
        _create(ctx, BranchType.FEATURE, words)

    @app.command("bug", rich_help_panel="Branching")
    def bug(ctx: typer.Context, words: Optional[List[str]] = typer.Argument(None, help=WORDS_HELP)):
        """Create bug/<name> from development (or the current release/* branch, see bug_source)."""
        _create(ctx, BranchType.BUG, words)

    @app.command("refactor", rich_help_panel="Branching")
    def refactor(ctx: typer.Context, words: Optional[List[str]] = typer.Argument(None, help=WORDS_HELP)):
        """Create refactor/<name> from development."""
        _create(ctx, BranchType.REFACTOR, words)

    @app.command("release", rich_help_panel="Branching")
    def release(ctx: typer.Context, words: Optional[List[str]] = typer.Argument(None, help=WORDS_HELP)):
        """Create release/<name> from development."""
        _create(ctx, BranchType.RELEASE, words)

    @app.command("hotfix", rich_help_panel="Branching")
    def hotfix(ctx: typer.Context, words: Optional[List[str]] = typer.Argument(None, help=WORDS_HELP)):
        """Create hotfix/<name> from main/master (production)."""
        _create(ctx, BranchType.HOTFIX, words)

    @app.command("branch", rich_help_panel="Branching")
    def branch(ctx: typer.Context, words: Optional[List[str]] = typer.Argument(None, help=WORDS_HELP)):
        """Create a plain branch from the current branch (no workflow rules)."""
        run_workflow(ctx, lambda service: service.create_plain_branch(words or []))

    @app.command("branches", rich_help_panel="Branching")
    def branches(
        ctx: typer.Context,
        output_format: OutputFormat = typer.Option(OutputFormat.TEXT, "--output", "-o", help="Output format"),
    ):
        """List local branches ('*' marks the current branch)."""
        result = run_workflow(ctx, lambda service: service.list_branches())
        OutputFormatter.format_branch_list(result, output_format)

    @app.command("checkout", rich_help_panel="Branching")
    def checkout(ctx: typer.Context, name: Optional[str] = typer.Argument(None, help="Branch to switch to")):
        """Switch to another branch."""
        run_workflow(ctx, lambda service: service.checkout(name))

    @app.command("development", rich_help_panel="Branching")
    def development(ctx: typer.Context):
        """Switch to the development branch."""
        run_workflow(ctx, lambda service: service.go_to_development())

    @app.command("gp", rich_help_panel="Branching")
    def gp(ctx: typer.Context):
        """git pull (alias)."""
        run_workflow(ctx, lambda service: service.pull())

    @app.command("gs", rich_help_panel="Branching")
    def gs(ctx: typer.Context):
        """git status (alias)."""
        run_workflow(ctx, lambda service: service.status())

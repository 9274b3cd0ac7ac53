"""Delete commands - branches and tags, local, remote or both."""

from typing import Optional

import typer

from git_workflow.api.cli.runner import run_workflow

BRANCH_HELP = "Branch name"
TAG_HELP = "Tag name"


def register(app: typer.Typer) -> None:
    """Register delete commands (and their short aliases) on the main app."""

    def delete_local_branch(ctx: typer.Context, name: Optional[str] = typer.Argument(None, help=BRANCH_HELP)):
        """Delete a local branch only (refused by git if unmerged)."""
        run_workflow(ctx, lambda service: service.delete_local_branch(name))

    def delete_remote_branch(ctx: typer.Context, name: Optional[str] = typer.Argument(None, help=BRANCH_HELP)):
        """Delete a remote branch only."""
        run_workflow(ctx, lambda service: service.delete_remote_branch(name))

    def delete_branch(ctx: typer.Context, name: Optional[str] = typer.Argument(None, help=BRANCH_HELP)):
        """Completely delete a branch locally and remotely (asks for confirmation)."""
        run_workflow(ctx, lambda service: service.delete_branch(name))

    app.command("delete-local-branch", rich_help_panel="Deleting")(delete_local_branch)
    app.command("delete-remote-branch", rich_help_panel="Deleting")(delete_remote_branch)
    app.command("delete-branch", rich_help_panel="Deleting")(delete_branch)
    app.command("dlb", rich_help_panel="Deleting", help="Alias for delete-local-branch.")(delete_local_branch)
    app.command("drb", rich_help_panel="Deleting", help="Alias for delete-remote-branch.")(delete_remote_branch)
    app.command("db", rich_help_panel="Deleting", help="Alias for delete-branch.")(delete_branch)

    @app.command("delete-local-tag", rich_help_panel="Deleting")
    def delete_local_tag(ctx: typer.Context, name: Optional[str] = typer.Argument(None, help=TAG_HELP)):
        """Delete a local tag only."""
        run_workflow(ctx, lambda service: service.delete_local_tag(name))

    @app.command("delete-remote-tag", rich_help_panel="Deleting")
    def delete_remote_tag(ctx: typer.Context, name: Optional[str] = typer.Argument(None, help=TAG_HELP)):
        """Delete a remote tag only."""
        run_workflow(ctx, lambda service: service.delete_remote_tag(name))

    @app.command("delete-tag", rich_help_panel="Deleting")
    def delete_tag(ctx: typer.Context, name: Optional[str] = typer.Argument(None, help=TAG_HELP)):
        """Completely delete a tag locally and remotely (asks for confirmation)."""
        run_workflow(ctx, lambda service: service.delete_tag(name))

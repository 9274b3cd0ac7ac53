"""Publishing commands - commit, pull requests, merges and deploys."""

from typing import List, Optional

import typer

from git_workflow.api.cli.runner import run_workflow

MESSAGE_HELP = "Commit message (quote it, or pass several words)"


def _message(words: Optional[List[str]]) -> str:
    return " ".join(words or [])


def register(app: typer.Typer) -> None:
    """Register publishing commands on the main app."""

    @app.command("commit", rich_help_panel="Committing")
    def commit(ctx: typer.Context, message: Optional[List[str]] = typer.Argument(None, help=MESSAGE_HELP)):
        """Stage all changes, commit, and push the current branch."""
        run_workflow(ctx, lambda service: service.commit_and_push(_message(message)))

    def pull_request(
        ctx: typer.Context,
        target: Optional[str] = typer.Argument(None, help="Target branch (default: development)"),
        by_type: bool = typer.Option(
            False, "--by-type", help="Derive the target from the branch type instead"
        ),
    ):
        """Open the browser to submit a pull request."""
        if by_type and target:
            raise typer.BadParameter("cannot combine a target branch with --by-type")
        if by_type:
            run_workflow(ctx, lambda service: service.open_typed_pull_request())
        else:
            run_workflow(ctx, lambda service: service.open_pull_request(target))

    app.command("pull-request", rich_help_panel="Committing")(pull_request)
    app.command("pr", rich_help_panel="Committing", help="Alias for pull-request.")(pull_request)

    @app.command("merge-release", rich_help_panel="Committing")
    def merge_release(ctx: typer.Context):
        """Merge the current release/* branch into development (--no-ff)."""
        run_workflow(ctx, lambda service: service.merge_release())

    @app.command("deploy", rich_help_panel="Committing")
    def deploy(ctx: typer.Context):
        """Open a development -> production pull request with a timestamped title."""
        run_workflow(ctx, lambda service: service.deploy())

    @app.command("cad", rich_help_panel="Committing")
    def cad(ctx: typer.Context, message: Optional[List[str]] = typer.Argument(None, help=MESSAGE_HELP)):
        """Commit and deploy."""
        run_workflow(ctx, lambda service: service.commit_and_deploy(_message(message)))

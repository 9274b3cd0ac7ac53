"""
Main CLI entry point for git-workflow.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.traceback import install

from git_workflow.api.cli.commands import branching, deleting, publishing, tagging
from git_workflow.api.cli.commands import config as config_commands
from git_workflow.api.cli.output_formatter import OutputFormatter
from git_workflow.application.workflow import WorkflowService
from git_workflow.config.settings import WorkflowSettings
from git_workflow.core.domain.models import build_workflow_rules

# Load environment variables from .env file
load_dotenv()

# Install rich tracebacks
install()

console = Console()

app = typer.Typer(
    name="git-workflow",
    help="git-workflow - branch naming, commit and pull-request conventions on top of git",
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
    invoke_without_command=True,
)

branching.register(app)
publishing.register(app)
tagging.register(app)
deleting.register(app)
app.add_typer(config_commands.app, name="config", help="Manage configuration")

USAGE = """\
BRANCHING
---------
* feature  <branch> : create new feature branch from development
* bug      <branch> : create new bug branch from development
* refactor <branch> : create new refactor branch from development
* release  <branch> : create new release branch from development
* hotfix   <branch> : create new hotfix branch from main (production)
* branch   <branch> : create new branch from the current branch
* branches          : list branches ('*' marks current branch)
* checkout <branch> : switch branch
* development       : switch to the development branch
* gp                : git pull (alias)
* gs                : git status (alias)

COMMITTING
----------
* commit '<message>'    : commit changes locally and push remotely
* pull-request <branch> : submit Pull Request to remote (opens browser)
* pr --by-type          : submit Pull Request to the branch type's target
* merge-release         : merge the current release branch into development
* deploy                : submit Pull Request from development to main
* cad '<message>'       : commit and deploy

DELETING
--------
* delete-local-branch  <branch> : delete local branch only
* dlb (alias)          <branch> : alias for delete-local-branch
* delete-remote-branch <branch> : delete remote branch only
* drb (alias)          <branch> : alias for delete-remote-branch
* delete-branch        <branch> : completely delete branch locally and remotely
* db (alias)           <branch> : alias for delete-branch
* delete-local-tag     <tag>    : delete local tag only
* delete-remote-tag    <tag>    : delete remote tag only
* delete-tag           <tag>    : completely delete tag locally and remotely

TAGGING
-------
* tag  : interactively create annotated tag
* tags : list tags

Run 'git-workflow rules' for the branching rules and '--help' for options."""


def setup_logging(debug: bool = False, level_name: Optional[str] = None) -> None:
    """Configure structlog for console or JSON output on stderr."""
    debug = debug or bool(os.getenv("GIT_WORKFLOW_DEBUG"))
    if debug:
        level = logging.DEBUG
    else:
        level = logging.getLevelName((level_name or "WARNING").upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version information"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose (debug) logging"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Print git commands without running them"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to confirmation prompts"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (default: ~/.git-workflow/config.yaml)"
    ),
):
    """
    git-workflow - branch naming, commit and pull-request conventions on top of git.

    Run without a command to see the command overview.
    """
    if version:
        console.print(WorkflowService.version(), highlight=False)
        raise typer.Exit()

    options = ctx.ensure_object(dict)
    options.update({"verbose": verbose, "dry_run": dry_run, "yes": yes, "config": config})

    settings = WorkflowSettings.load_from_file(config or WorkflowSettings.get_config_path())
    setup_logging(debug=verbose, level_name=settings.log_level)

    if ctx.invoked_subcommand is None:
        show_help()
        raise typer.Exit()


def show_help() -> None:
    console.print(f"version: {WorkflowService.version()}", highlight=False)
    console.print("")
    console.print(USAGE, highlight=False, markup=False)


@app.command("version", rich_help_panel="Help")
def version():
    """Show git-workflow version."""
    console.print(WorkflowService.version(), highlight=False)


@app.command("rules", rich_help_panel="Help")
def rules(ctx: typer.Context):
    """Show which branches each branch type may start from and merge into."""
    options = ctx.find_root().obj or {}
    config = options.get("config")
    settings = WorkflowSettings.load_from_file(config or WorkflowSettings.get_config_path())
    workflow_rules = build_workflow_rules(
        development=settings.development_branch,
        production=settings.production_branch,
        bug_source=settings.bug_source,
    )
    OutputFormatter.format_rules(list(workflow_rules.values()))


def cli_main():
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        if "--verbose" in sys.argv:
            console.print_exception()
        else:
            console.print(f"[red]Error: {e}[/red]")
            console.print("[dim]Use --verbose for detailed error information[/dim]")
        sys.exit(1)


if __name__ == "__main__":
    cli_main()

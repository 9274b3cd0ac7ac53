"""Bridge between typer commands and the WorkflowService."""

from pathlib import Path
from typing import Callable, TypeVar

import structlog
import typer

from git_workflow.api.cli.output_formatter import WorkflowConsole
from git_workflow.application.factory import WorkflowFactory
from git_workflow.application.workflow import WorkflowService
from git_workflow.core.domain.errors import WorkflowError

T = TypeVar("T")

logger = structlog.get_logger()


def _options(ctx: typer.Context) -> dict:
    root = ctx.find_root()
    return root.obj if isinstance(root.obj, dict) else {}


def build_service(ctx: typer.Context, reporter: WorkflowConsole) -> WorkflowService:
    """Create the service for this invocation from the global CLI options."""
    options = _options(ctx)
    config_path = options.get("config")
    factory = WorkflowFactory(config_path=Path(config_path) if config_path else None)
    settings = factory.load_settings(
        dry_run=True if options.get("dry_run") else None,
        auto_confirm=True if options.get("yes") else None,
    )
    return factory.create_service(reporter=reporter, settings=settings)


def run_workflow(ctx: typer.Context, action: Callable[[WorkflowService], T]) -> T:
    """
    Run one workflow verb and translate failures into exit codes.

    WorkflowError prints `-----> ERROR: ...` plus its hint and exits with the
    error's code; everything else propagates to the top-level handler.
    """
    reporter = WorkflowConsole()
    try:
        service = build_service(ctx, reporter)
        return action(service)
    except WorkflowError as e:
        logger.info(
            "workflow_error",
            command=ctx.command_path,
            error=type(e).__name__,
            message=e.message,
            exit_code=e.exit_code,
        )
        reporter.error(e.message, e.hint)
        raise typer.Exit(e.exit_code)

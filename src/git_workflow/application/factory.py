"""
Application Layer - Workflow Factory

Wires settings and infrastructure adapters into a WorkflowService. A new
service is built for every CLI invocation; nothing is shared between them.
"""

from pathlib import Path
from typing import Any, Optional

import structlog

from git_workflow.application.workflow import WorkflowService
from git_workflow.config.settings import WorkflowSettings
from git_workflow.core.interfaces.git import GitClientProtocol
from git_workflow.core.interfaces.io import BrowserProtocol, PromptProtocol, ReporterProtocol
from git_workflow.infrastructure.git.subprocess_git import SubprocessGitClient
from git_workflow.infrastructure.terminal import ConsolePrompt, SystemBrowser


class WorkflowFactory:
    """
    Factory for creating workflow services with dependency injection.

    Settings are layered: YAML config file, then environment variables
    (`GIT_WORKFLOW_*`), then per-invocation overrides such as `--dry-run`.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else WorkflowSettings.get_config_path()
        self.logger = structlog.get_logger().bind(component="workflow_factory")

    def load_settings(self, **overrides: Any) -> WorkflowSettings:
        """Load settings from the config file and apply non-None overrides."""
        settings = WorkflowSettings.load_from_file(self.config_path)
        for key, value in overrides.items():
            if value is not None:
                setattr(settings, key, value)
        self.logger.debug("settings_loaded", config_path=str(self.config_path), **settings.model_dump(mode="json"))
        return settings

    def create_service(
        self,
        reporter: ReporterProtocol,
        settings: Optional[WorkflowSettings] = None,
        git: Optional[GitClientProtocol] = None,
        prompt: Optional[PromptProtocol] = None,
        browser: Optional[BrowserProtocol] = None,
        cwd: Optional[Path] = None,
    ) -> WorkflowService:
        """
        Create a WorkflowService.

        Args:
            reporter: Sink for user-facing output
            settings: Settings to use; loaded from config when omitted
            git: Git port; defaults to SubprocessGitClient rooted at `cwd`
            prompt: Prompt port; defaults to ConsolePrompt
            browser: Browser port; defaults to SystemBrowser
            cwd: Working directory to resolve the repository from

        Returns:
            Ready-to-use WorkflowService
        """
        settings = settings or self.load_settings()
        git = git or SubprocessGitClient(cwd=cwd, remote=settings.remote)
        prompt = prompt or ConsolePrompt()
        browser = browser or SystemBrowser()

        self.logger.debug(
            "service_created",
            git=type(git).__name__,
            dry_run=settings.dry_run,
            auto_confirm=settings.auto_confirm,
        )
        return WorkflowService(
            git=git,
            prompt=prompt,
            browser=browser,
            reporter=reporter,
            settings=settings,
        )

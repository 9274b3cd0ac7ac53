"""
Output formatting for the CLI.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.json import JSON
from rich.markup import escape
from rich.table import Table

from git_workflow.core.domain.models import WorkflowRule

ERROR_PREFIX = "-----> ERROR:"

console = Console()


class OutputFormat(str, Enum):
    """Available output formats."""
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"
    TEXT = "text"


class WorkflowConsole:
    """
    User-facing output of workflow verbs.

    Implements ReporterProtocol on top of a rich console. Lines are printed
    with soft wrapping so long command lines and URLs stay copy-pasteable.
    """

    def __init__(self, output: Optional[Console] = None):
        self.console = output or console

    def command(self, line: str) -> None:
        self.console.print(f"[bold]=>[/bold] {escape(line)}", soft_wrap=True, highlight=False)

    def info(self, line: str) -> None:
        self.console.print(escape(line), soft_wrap=True, highlight=False)

    def warning(self, line: str) -> None:
        self.console.print(f"[yellow]{escape(line)}[/yellow]", soft_wrap=True, highlight=False)

    def error(self, message: str, hint: Optional[str] = None) -> None:
        self.console.print(f"[red]{ERROR_PREFIX} {escape(message)}[/red]", soft_wrap=True, highlight=False)
        if hint:
            self.console.print(f"[red]----->[/red] {escape(hint)}", soft_wrap=True, highlight=False)


class OutputFormatter:
    """Handles formatting output in different formats."""

    @staticmethod
    def format_data(data: Any, format_type: OutputFormat, title: str = None) -> None:
        """Format and display data in the specified format."""
        if format_type == OutputFormat.TABLE:
            OutputFormatter._format_table(data, title)
        elif format_type == OutputFormat.JSON:
            OutputFormatter._format_json(data)
        elif format_type == OutputFormat.YAML:
            OutputFormatter._format_yaml(data)
        elif format_type == OutputFormat.TEXT:
            OutputFormatter._format_text(data)

    @staticmethod
    def _format_table(data: Any, title: str = None) -> None:
        """Format data as a Rich table."""
        if isinstance(data, list) and len(data) > 0 and isinstance(data[0], dict):
            table = Table(title=title)

            for key in data[0].keys():
                table.add_column(key.replace('_', ' ').title(), style="cyan")

            for item in data:
                row_values = []
                for value in item.values():
                    if isinstance(value, (list, dict)):
                        row_values.append(str(value))
                    else:
                        row_values.append(str(value) if value is not None else "")
                table.add_row(*row_values)

            console.print(table)

        elif isinstance(data, dict):
            table = Table(title=title, show_header=False)
            table.add_column("Property", style="cyan")
            table.add_column("Value", style="white")

            for key, value in data.items():
                if isinstance(value, (list, dict)):
                    value_str = json.dumps(value, indent=2)
                else:
                    value_str = str(value) if value is not None else ""
                table.add_row(key.replace('_', ' ').title(), value_str)

            console.print(table)

        else:
            console.print(str(data))

    @staticmethod
    def _format_json(data: Any) -> None:
        """Format data as JSON."""
        if hasattr(data, 'model_dump'):
            json_data = data.model_dump(mode="json")
        else:
            json_data = data

        console.print(JSON.from_data(json_data))

    @staticmethod
    def _format_yaml(data: Any) -> None:
        """Format data as YAML."""
        if hasattr(data, 'model_dump'):
            yaml_data = data.model_dump(mode="json")
        else:
            yaml_data = data

        yaml_str = yaml.dump(yaml_data, default_flow_style=False, indent=2)
        console.print(yaml_str, highlight=False)

    @staticmethod
    def _format_text(data: Any) -> None:
        """Format data as plain text."""
        if isinstance(data, list):
            for item in data:
                console.print(escape(str(item)), highlight=False)
        else:
            console.print(escape(str(data)), highlight=False)

    @staticmethod
    def format_branch_list(branches: List[Dict[str, Any]], format_type: OutputFormat) -> None:
        """Format branch list, marking the current branch with '*'."""
        if format_type == OutputFormat.TABLE:
            table = Table(title="Branches")
            table.add_column("", style="green", no_wrap=True, width=1)
            table.add_column("Name", no_wrap=True)

            for branch in branches:
                if branch.get("current"):
                    table.add_row("*", f"[bold green]{escape(branch['name'])}[/bold green]")
                else:
                    table.add_row("", escape(branch["name"]))

            console.print(table)
        elif format_type == OutputFormat.TEXT:
            for branch in branches:
                marker = "*" if branch.get("current") else " "
                console.print(f"{marker} {escape(branch['name'])}", highlight=False)
        else:
            OutputFormatter.format_data(branches, format_type)

    @staticmethod
    def format_tag_list(tags: List[str], format_type: OutputFormat) -> None:
        if format_type == OutputFormat.TABLE:
            table = Table(title="Tags")
            table.add_column("Tag", style="cyan", no_wrap=True)
            for tag in tags:
                table.add_row(escape(tag))
            console.print(table)
        else:
            OutputFormatter.format_data(tags, format_type)

    @staticmethod
    def format_rules(rules: List[WorkflowRule]) -> None:
        """Print the workflow rule table the way `git-workflow rules` always has."""
        for rule in rules:
            console.print(f"* {rule.branch_type.value}", highlight=False)
            console.print(
                f"    {escape(rule.source_label)} -> {escape(rule.target_label)} ({rule.deploys_to})",
                highlight=False,
            )

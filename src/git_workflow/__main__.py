"""Allow `python -m git_workflow`."""

from git_workflow.api.cli.main import cli_main

if __name__ == "__main__":
    cli_main()

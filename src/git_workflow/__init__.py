"""Git Workflow - branch naming and pull-request conventions on top of git."""

__version__ = "2.3.0"
__release_date__ = "2021-01-27"

"""Allow ``python -m p4jira``."""

from .cli.app import run

run()

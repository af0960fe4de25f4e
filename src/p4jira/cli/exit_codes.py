"""
Exit Codes - Process exit statuses for the p4jira CLI.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes returned by main()."""

    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    CONNECTION_ERROR = 3
    PARTIAL_SUCCESS = 4
    CANCELLED = 130

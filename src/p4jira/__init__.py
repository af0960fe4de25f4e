"""
p4jira - Perforce to Jira change synchronization.

Discovers new submitted changes in a Perforce depot path, finds the Jira
issue keys referenced in their descriptions, and comments on those issues
with the change description, the affected files and the diffs.
"""

__version__ = "1.0.0"

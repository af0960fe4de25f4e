"""
Macro expansion for configuration values.

A value may reference another value as ``${name}``. References are
substituted repeatedly, so a binding may itself contain references.
"""

import re
from typing import Mapping


MACRO_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

DEFAULT_MAX_ITERATIONS = 10


def expand(text: str, bindings: Mapping[str, str], max_iterations: int = DEFAULT_MAX_ITERATIONS) -> str:
    """
    Substitute ``${name}`` references until the text stops changing.

    Unknown names are left as they are. Self-referencing bindings stop
    after max_iterations passes instead of looping forever.

    Args:
        text: Text containing macro references
        bindings: Name to value mapping
        max_iterations: Upper bound on substitution passes

    Returns:
        The expanded text
    """

    def substitute(match: re.Match) -> str:
        value = bindings.get(match.group(1))
        return match.group(0) if value is None else str(value)

    for _ in range(max_iterations):
        expanded = MACRO_PATTERN.sub(substitute, text)
        if expanded == text:
            break
        text = expanded

    return text

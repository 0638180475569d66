import os
import re
from typing import Dict

from takein.errors import ResolutionError

# $NAME or ${NAME}
VAR_PATTERN = re.compile(r"\$(?:\{([^}]*)\}|([A-Za-z0-9_]+))")


def expand(pattern: str, env: Dict[str, str]) -> str:
    """
    Substitute $NAME / ${NAME} references from env.

    Stops at the first reference missing from env. A "$" not followed by a
    name is kept as is.
    """
    def replace(match: re.Match) -> str:
        name = match.group(1) if match.group(1) is not None else match.group(2)
        if name not in env:
            raise ResolutionError(f"unknown environ variable in dest: ${name}", variable=name)
        return env[name]

    return VAR_PATTERN.sub(replace, pattern)


def resolve(source: str, pattern: str, env: Dict[str, str]) -> str:
    """
    Return the directory the source should be taken into.

    The pattern is only trimmed and expanded against env; the result is not
    normalized and the process environment is never consulted.
    """
    if not os.path.isabs(source):
        raise ResolutionError(f"not an absolute path: {source}")
    return expand(pattern.strip(), env)

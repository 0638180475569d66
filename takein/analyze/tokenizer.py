from typing import Dict, List, Sequence

from takein.errors import TokenizationError
from takein.schemas import DISCARD_KEY, DIVIDER_KEY


def split_fragments(text: str, separators: Sequence[str]) -> List[str]:
    """
    Split text at the earliest occurring separator, repeatedly.

    Whitespace-only separators never split. The result always has one more
    fragment than the number of separators consumed.
    """
    seps = [s for s in separators if s.strip()]
    fragments: List[str] = []
    remain = text
    while True:
        idx = -1
        cutter = ""
        for sep in seps:
            i = remain.find(sep)
            if i < 0:
                continue
            # On equal positions the earlier listed separator wins.
            if idx < 0 or i < idx:
                idx = i
                cutter = sep
        if idx < 0:
            fragments.append(remain)
            return fragments
        fragments.append(remain[:idx])
        remain = remain[idx + len(cutter):]


def tokenize(text: str, separators: Sequence[str], keys: Sequence[str]) -> Dict[str, str]:
    """
    Bind the fragments of text to keys.

    Keys left of the "..." divider bind from the front, keys right of it bind
    from the back, and fragments in between are dropped. A "_" key consumes a
    fragment without storing it.
    """
    vals = split_fragments(text, separators)

    divider = -1
    for i, key in enumerate(keys):
        if key == DIVIDER_KEY:
            if divider != -1:
                raise TokenizationError("multiple key divider (...) is not allowed")
            divider = i

    if divider == -1:
        if len(vals) > len(keys):
            raise TokenizationError(f"too many values for keys: {text}")
        if len(vals) < len(keys):
            raise TokenizationError(f"not enough values for keys: {text}")
        left_keys, right_keys = list(keys), []
    else:
        if len(vals) < len(keys) - 1:
            raise TokenizationError(f"not enough values for keys: {text}")
        left_keys, right_keys = list(keys[:divider]), list(keys[divider + 1:])

    env: Dict[str, str] = {}
    for key, val in zip(left_keys, vals):
        if key != DISCARD_KEY:
            env[key] = val
    # index from right
    for i, key in enumerate(reversed(right_keys)):
        if key != DISCARD_KEY:
            env[key] = vals[len(vals) - 1 - i]
    return env

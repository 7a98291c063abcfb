"""Name collision resolution for robots, connections and devices."""

from collections.abc import Iterable


def make_unique(name: str, existing: Iterable[str]) -> str:
    """
    Return `name` with the smallest `-N` suffix not present in `existing`.

    Args:
        name: Requested name
        existing: Names already taken

    Returns:
        First of name-1, name-2, ... that is not taken
    """
    taken = set(existing)
    suffix = 1
    while f"{name}-{suffix}" in taken:
        suffix += 1
    return f"{name}-{suffix}"

"""
Field location — find vocabulary keys anywhere in a JSON tree.

Agent-friendly fields are often nested (under "metadata", "error",
"meta.reasoning", ...), so lookup is breadth-first: the shallowest
occurrence wins, ties broken by document order.
"""

import re
from collections import deque
from typing import Any, Collection, Iterator, List, Optional, Sequence, Tuple

from agent_lint.errors import RootNotFoundError

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

Located = Tuple[Any, str]


def child_path(parent: str, key: Any) -> str:
    """Extend a JSON path with an object key or array index."""
    if isinstance(key, int):
        return f"{parent}[{key}]"
    if _IDENTIFIER.match(key):
        return f"{parent}.{key}"
    return f"{parent}['{key}']"


def walk_objects(
    tree: Any,
    base: str = "$",
    skip: Collection[str] = (),
) -> Iterator[Tuple[dict, str, int]]:
    """
    Yield (object, path, depth) for every JSON object, breadth-first.

    Values held under a key in `skip` are not descended into.
    """
    queue = deque([(tree, base, 0)])
    while queue:
        node, path, depth = queue.popleft()
        if isinstance(node, dict):
            yield node, path, depth
            for key, value in node.items():
                if key in skip:
                    continue
                if isinstance(value, (dict, list)):
                    queue.append((value, child_path(path, key), depth + 1))
        elif isinstance(node, list):
            for index, value in enumerate(node):
                if isinstance(value, (dict, list)):
                    queue.append((value, child_path(path, index), depth + 1))


def locate(
    tree: Any,
    name: str,
    base: str = "$",
    skip: Collection[str] = (),
) -> Optional[Located]:
    """Return (value, path) of the shallowest occurrence of key `name`."""
    for obj, path, _ in walk_objects(tree, base, skip):
        if name in obj:
            return obj[name], child_path(path, name)
    return None


def locate_all(
    tree: Any,
    name: str,
    base: str = "$",
    skip: Collection[str] = (),
) -> List[Located]:
    """Every occurrence of key `name`, shallowest first."""
    return [
        (obj[name], child_path(path, name))
        for obj, path, _ in walk_objects(tree, base, skip)
        if name in obj
    ]


def find_anchor(
    tree: Any,
    names: Sequence[str],
    base: str = "$",
    skip: Collection[str] = (),
) -> Optional[Tuple[dict, str]]:
    """
    Find the object holding the most of `names` together.

    Ties go to the shallowest object, then document order. Returns None
    when no object holds any of the names.
    """
    best = None
    best_key = (0, 0)
    for obj, path, depth in walk_objects(tree, base, skip):
        hits = sum(1 for n in names if n in obj)
        if hits == 0:
            continue
        key = (hits, -depth)
        if best is None or key > best_key:
            best = (obj, path)
            best_key = key
    return best


def select_root(tree: Any, root: str) -> Located:
    """Resolve a dotted root path ("data.items.0") against the tree."""
    if not root:
        return tree, "$"
    node = tree
    path = "$"
    for part in root.split("."):
        if isinstance(node, dict) and part in node:
            node = node[part]
            path = child_path(path, part)
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
            path = child_path(path, int(part))
        else:
            raise RootNotFoundError(root)
    return node, path

"""
File Tree

Turns the remote flat list of paths into an ordered folder/file hierarchy,
and tracks which folders are expanded.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

SEPARATOR = "/"


class InvalidPathError(ValueError):
    """A remote path is empty or contains an empty segment."""


class NodeKind(Enum):
    """Type of tree node."""

    FOLDER = "folder"
    FILE = "file"


@dataclass
class Node:
    """A single path segment in the tree."""

    name: str
    path: str
    kind: NodeKind
    children: List["Node"] = field(default_factory=list)  # Always empty for files

    @property
    def is_folder(self) -> bool:
        return self.kind == NodeKind.FOLDER

    @property
    def is_file(self) -> bool:
        return self.kind == NodeKind.FILE


def split_path(path: str) -> List[str]:
    """
    Split a path into its segments.

    Raises:
        InvalidPathError: If the path is empty or has an empty segment
    """
    if not path:
        raise InvalidPathError("Empty path in name list")
    parts = path.split(SEPARATOR)
    if any(not part for part in parts):
        raise InvalidPathError(f"Path has an empty segment: {path!r}")
    return parts


def name_key(name: str) -> Tuple[str, str, str]:
    """
    Sort key approximating a locale collation.

    Case-insensitive first; on a tie, lowercase sorts before uppercase.
    Names that fold to the same text (``"ß"`` and ``"ss"``) fall back to
    the raw name, so distinct names never compare equal.
    """
    return (name.casefold(), name.swapcase(), name)


def _sort_level(nodes: List[Node]) -> None:
    nodes.sort(key=lambda n: (n.kind != NodeKind.FOLDER, name_key(n.name)))
    for node in nodes:
        if node.children:
            _sort_level(node.children)


def build_tree(paths: Iterable[str]) -> List[Node]:
    """
    Build the navigation tree from a flat list of paths.

    The last segment of each path is a file, every earlier segment a folder.
    Each level is ordered folders first, then by name, so the result does
    not depend on input order.

    A path that collides with an existing node of the other kind (``a`` as a
    file and ``a/b``) is skipped; whichever node was created first is kept.

    Raises:
        InvalidPathError: If any path is empty or has an empty segment
    """
    roots: List[Node] = []
    # Children of each level indexed by name, keyed by the level's list id
    index: Dict[int, Dict[str, Node]] = {id(roots): {}}

    for path in paths:
        parts = split_path(path)
        level = roots
        for depth, part in enumerate(parts):
            is_file = depth == len(parts) - 1
            kind = NodeKind.FILE if is_file else NodeKind.FOLDER
            siblings = index[id(level)]
            node = siblings.get(part)

            if node is None:
                node = Node(name=part, path=SEPARATOR.join(parts[: depth + 1]), kind=kind)
                siblings[part] = node
                level.append(node)
                if not is_file:
                    index[id(node.children)] = {}
            elif node.kind != kind:
                logger.debug(f"Skipping {path!r}: {node.path!r} already exists as a {node.kind.value}")
                break

            if not is_file:
                level = node.children

    _sort_level(roots)
    return roots


def find_node(tree: List[Node], path: str) -> Optional[Node]:
    """Look up a node by its full path."""
    level = tree
    node = None
    for part in path.split(SEPARATOR):
        node = next((n for n in level if n.name == part), None)
        if node is None:
            return None
        level = node.children
    return node


def iter_visible(tree: List[Node], expanded: "ExpandedFolders", depth: int = 0) -> Iterator[Tuple[int, Node]]:
    """Yield (depth, node) for each row an explorer would show."""
    for node in tree:
        yield depth, node
        if node.is_folder and node.path in expanded:
            yield from iter_visible(node.children, expanded, depth + 1)


class ExpandedFolders:
    """
    Set of expanded folder paths.

    Keyed by path string, so state carries over when the tree is rebuilt.
    """

    def __init__(self, paths: Iterable[str] = ()):
        self._paths: Set[str] = set(paths)

    def toggle(self, path: str) -> bool:
        """Flip a folder's state; returns True if it is now expanded."""
        if path in self._paths:
            self._paths.discard(path)
            return False
        self._paths.add(path)
        return True

    def is_expanded(self, path: str) -> bool:
        return path in self._paths

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def paths(self) -> List[str]:
        return sorted(self._paths)

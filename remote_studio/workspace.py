"""
Workspace State

Single state record behind the viewer: remote name list, navigation tree,
content cache and selection, expanded folders, activity log and
connectivity status. Each user action maps to one method here.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from .activity_log import DEFAULT_CAPACITY, ActivityLog
from .content_cache import ContentCache, FetchCoordinator
from .file_tree import ExpandedFolders, InvalidPathError, Node, build_tree, find_node, iter_visible
from .highlight import highlight_code, line_numbers
from .models import LogEntryModel, PromptResult, TreeNodeModel, TreeRowModel, WorkspaceState
from .prober import ConnectionStatus, ConnectivityProber
from .remote_client import RemoteClient, RemoteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedFile:
    """Highlighted view of the selected file."""

    path: str
    html: str
    line_count: int


class Workspace:
    """Viewer state for one remote workspace."""

    def __init__(self, remote: RemoteClient, log_capacity: int = DEFAULT_CAPACITY):
        self.remote = remote
        self.log = ActivityLog(capacity=log_capacity)
        self.cache = ContentCache()
        self.files = FetchCoordinator(remote, self.cache, self.log)
        self.prober = ConnectivityProber(remote.list_names, self.log)
        self.expanded = ExpandedFolders()
        self.names: List[str] = []
        self.tree: List[Node] = []
        self._pending = 0

    @property
    def loading(self) -> bool:
        return self._pending > 0

    @property
    def status(self) -> ConnectionStatus:
        return self.prober.status

    @property
    def selection(self) -> Optional[str]:
        return self.files.selection

    @contextmanager
    def _busy(self) -> Iterator[None]:
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1

    # Remote actions

    async def check_status(self) -> ConnectionStatus:
        return await self.prober.check()

    async def refresh_names(self) -> bool:
        """Reload the remote name list and rebuild the tree from it."""
        with self._busy():
            try:
                response = await self.files.list_names()
            except RemoteError as e:
                self.log.append(f"Names error: {e}")
                return False

            if response.names is None:
                logger.warning("Name list response had no names")
                return False
            try:
                tree = build_tree(response.names)
            except InvalidPathError as e:
                logger.error(f"Rejected name list: {e}")
                self.log.append(f"Names error: {e}")
                return False

            self.names = list(response.names)
            self.tree = tree
            self.log.append("Workspace updated")
            return True

    async def fetch(self, paths: Sequence[str]) -> bool:
        """Explicitly fetch (or refetch) the given paths."""
        if not paths:
            return False
        with self._busy():
            return await self.files.fetch_many(paths)

    async def sync_all(self) -> bool:
        """Fetch every known path in one batch."""
        return await self.fetch(self.names)

    async def open_file(self, path: str) -> bool:
        """Navigate to a file; only uncached files hit the network."""
        with self._busy():
            return await self.files.open(path)

    async def send_prompt(self, prompt: str) -> PromptResult:
        """Forward an instruction to the remote agent. Blank prompts are ignored."""
        if not prompt.strip():
            return PromptResult(sent=False)
        with self._busy():
            self.log.append("Sending prompt...")
            try:
                response = await self.remote.send_prompt(prompt)
            except RemoteError as e:
                self.log.append(f"AI error: {e}")
                return PromptResult(sent=False)
            status = response.status or "Success"
            self.log.append(f"AI: {status}")
            return PromptResult(sent=True, status=status)

    # Local actions

    def select(self, path: str) -> None:
        self.files.select(path)

    def close_file(self, path: str) -> bool:
        return self.files.close(path)

    def toggle_folder(self, path: str) -> bool:
        """
        Expand or collapse a folder of the current tree.

        Raises:
            KeyError: If the path is not a folder in the tree
        """
        node = find_node(self.tree, path)
        if node is None or not node.is_folder:
            raise KeyError(path)
        return self.expanded.toggle(path)

    def render_selected(self) -> Optional[RenderedFile]:
        """Highlight the selected file, or None if nothing renderable is selected."""
        path = self.selection
        if path is None:
            return None
        return self.render(path)

    def render(self, path: str) -> Optional[RenderedFile]:
        code = self.cache.get(path)
        if code is None:
            return None
        return RenderedFile(path=path, html=highlight_code(code), line_count=len(line_numbers(code)))

    # Snapshot

    def _node_model(self, node: Node) -> TreeNodeModel:
        if node.is_folder:
            return TreeNodeModel(
                name=node.name,
                path=node.path,
                kind=node.kind.value,
                expanded=node.path in self.expanded,
                children=[self._node_model(child) for child in node.children],
            )
        return TreeNodeModel(
            name=node.name,
            path=node.path,
            kind=node.kind.value,
            cached=node.path in self.cache,
        )

    def snapshot(self) -> WorkspaceState:
        return WorkspaceState(
            status=self.status.value,
            loading=self.loading,
            names=list(self.names),
            tree=[self._node_model(node) for node in self.tree],
            rows=[
                TreeRowModel(depth=depth, name=node.name, path=node.path, kind=node.kind.value)
                for depth, node in iter_visible(self.tree, self.expanded)
            ],
            open_files=self.cache.paths(),
            selected=self.selection,
            logs=[LogEntryModel(timestamp=e.timestamp, message=e.message) for e in self.log],
        )

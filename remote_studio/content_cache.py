"""
Content Cache & Fetch Coordinator

Keeps fetched file bodies keyed by path, reconciles the two response shapes
the remote host may send, and decides which file is selected after a fetch.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from .activity_log import ActivityLog
from .models import NamesResponse
from .remote_client import RemoteClient, RemoteError

logger = logging.getLogger(__name__)


# Response shapes

@dataclass(frozen=True)
class PositionalCodes:
    """``codes`` array aligned with the requested paths; ``None`` slots are absent."""

    codes: List[Optional[str]]


@dataclass(frozen=True)
class NamedFiles:
    """``files`` array of ``{name, code}`` pairs applied by name."""

    files: Dict[str, str]


ContentPayload = Union[PositionalCodes, NamedFiles]


def parse_content_response(data: Dict[str, Any]) -> List[ContentPayload]:
    """
    Extract every recognised shape from a content response.

    Returns an empty list when neither ``codes`` nor ``files`` is a list.
    """
    payloads: List[ContentPayload] = []

    files = data.get("files")
    if isinstance(files, list):
        named: Dict[str, str] = {}
        for item in files:
            if not isinstance(item, dict):
                continue
            name, code = item.get("name"), item.get("code")
            if isinstance(name, str) and name and isinstance(code, str):
                named[name] = code
        payloads.append(NamedFiles(files=named))

    codes = data.get("codes")
    if isinstance(codes, list):
        payloads.append(PositionalCodes(codes=[c if isinstance(c, str) else None for c in codes]))

    return payloads


def merge_contents(requested: Sequence[str], payloads: Sequence[ContentPayload]) -> Dict[str, str]:
    """
    Combine response shapes into one path -> text update.

    Named files are applied first and positional codes last, so the positional
    array wins when both carry the same path.
    """
    update: Dict[str, str] = {}
    for payload in payloads:
        if isinstance(payload, NamedFiles):
            update.update(payload.files)
    for payload in payloads:
        if isinstance(payload, PositionalCodes):
            for path, code in zip(requested, payload.codes):
                if code is not None:
                    update[path] = code
    return update


def next_selection(current: Optional[str], requested: Sequence[str]) -> Optional[str]:
    """
    Selection after a successful fetch.

    A single requested path always becomes selected; for several, the first
    one is selected only when nothing is selected yet.
    """
    if len(requested) == 1:
        return requested[0]
    if len(requested) > 1 and current is None:
        return requested[0]
    return current


# Cache

@dataclass
class FetchTicket:
    """Generations captured for each path when a fetch was issued."""

    generations: Dict[str, int] = field(default_factory=dict)


class ContentCache:
    """
    Path -> text mapping with per-path request generations.

    A write from a response is applied only if no newer request for the
    same path has been issued since, so out-of-order responses cannot
    overwrite fresher ones.
    """

    def __init__(self):
        self._contents: Dict[str, str] = {}
        self._generations: Dict[str, int] = {}

    def get(self, path: str) -> Optional[str]:
        return self._contents.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._contents

    def __len__(self) -> int:
        return len(self._contents)

    def paths(self) -> List[str]:
        """Cached paths in the order they were first stored."""
        return list(self._contents)

    def put(self, path: str, text: str) -> None:
        self._contents[path] = text

    def remove(self, path: str) -> bool:
        """Drop a cached entry; returns False if it was not cached."""
        return self._contents.pop(path, None) is not None

    def begin(self, paths: Sequence[str]) -> FetchTicket:
        """Issue a new generation for every path about to be fetched."""
        ticket = FetchTicket()
        for path in paths:
            generation = self._generations.get(path, 0) + 1
            self._generations[path] = generation
            ticket.generations[path] = generation
        return ticket

    def is_current(self, ticket: FetchTicket, path: str) -> bool:
        return path in ticket.generations and ticket.generations[path] == self._generations.get(path)

    def commit(self, ticket: FetchTicket, contents: Dict[str, str]) -> List[str]:
        """
        Write the contents whose generation is still current.

        Returns the paths that were discarded as stale. Paths the ticket never
        requested (named files the host volunteered) are written as well.
        """
        stale: List[str] = []
        for path, text in contents.items():
            if path in ticket.generations and not self.is_current(ticket, path):
                stale.append(path)
                continue
            self._contents[path] = text
        return stale


# Coordinator

class FetchCoordinator:
    """Runs fetches against the remote host and owns the selection."""

    def __init__(self, remote: RemoteClient, cache: ContentCache, log: ActivityLog):
        self.remote = remote
        self.cache = cache
        self.log = log
        self.selection: Optional[str] = None

    async def list_names(self) -> NamesResponse:
        """Passthrough to the remote name list; nothing is cached."""
        return await self.remote.list_names()

    async def fetch_many(self, paths: Sequence[str]) -> bool:
        """
        Fetch several files in one request and store what comes back.

        Returns True on a successful round trip. Failures are logged and
        leave the cache untouched.
        """
        requested = list(paths)
        if not requested:
            return False

        self.log.append(f"Syncing {len(requested)} files...")
        ticket = self.cache.begin(requested)
        try:
            data = await self.remote.fetch_codes(requested)
        except RemoteError as e:
            self.log.append(f"Sync error: {e}")
            return False

        payloads = parse_content_response(data)
        if not payloads:
            logger.warning(f"Content response had neither codes nor files for {len(requested)} paths")
            self.log.append("Sync returned no content")
            return True

        stale = self.cache.commit(ticket, merge_contents(requested, payloads))
        if stale:
            logger.info(f"Discarded stale content for: {', '.join(stale)}")

        self.selection = next_selection(self.selection, requested)
        self.log.append("Sync complete")
        return True

    async def fetch_one(self, path: str) -> bool:
        return await self.fetch_many([path])

    def get(self, path: str) -> Optional[str]:
        return self.cache.get(path)

    def select(self, path: str) -> None:
        """
        Select a cached path without any network traffic.

        Raises:
            KeyError: If the path is not cached
        """
        if path not in self.cache:
            raise KeyError(path)
        self.selection = path

    async def open(self, path: str) -> bool:
        """Navigate to a file: select it if cached, otherwise fetch it."""
        if path in self.cache:
            self.selection = path
            return True
        return await self.fetch_one(path)

    def close(self, path: str) -> bool:
        """
        Remove a cached file (close its tab).

        Removing the selected file leaves nothing selected.
        """
        removed = self.cache.remove(path)
        if self.selection == path:
            self.selection = None
        return removed

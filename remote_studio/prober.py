"""
Connectivity Prober

Reduces a lightweight remote call to a checking/online/offline status.
The result is informational only and never gates other operations.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from .activity_log import ActivityLog
from .remote_client import RemoteError

logger = logging.getLogger(__name__)


class ConnectionStatus(Enum):
    """Reachability of the remote host."""

    CHECKING = "checking"
    ONLINE = "online"
    OFFLINE = "offline"


class ConnectivityProber:
    """Tracks remote reachability by running a probe call on demand."""

    def __init__(self, probe: Callable[[], Awaitable[Any]], log: ActivityLog):
        self._probe = probe
        self._log = log
        self._task: Optional[asyncio.Task] = None
        self.status = ConnectionStatus.CHECKING

    async def check(self) -> ConnectionStatus:
        """Run the probe once; always passes through CHECKING first."""
        self.status = ConnectionStatus.CHECKING
        try:
            await self._probe()
        except RemoteError as e:
            logger.warning(f"Connectivity probe failed: {e}")
            self.status = ConnectionStatus.OFFLINE
            self._log.append("Offline")
        else:
            self.status = ConnectionStatus.ONLINE
            self._log.append("Connected")
        return self.status

    def start(self) -> asyncio.Task:
        """Schedule a probe in the background on the running loop."""
        self._task = asyncio.ensure_future(self.check())
        return self._task

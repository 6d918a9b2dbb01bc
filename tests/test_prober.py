from __future__ import annotations

import asyncio

from remote_studio.activity_log import ActivityLog
from remote_studio.prober import ConnectionStatus, ConnectivityProber
from remote_studio.remote_client import RemoteClient


def test_status_starts_checking(remote: RemoteClient) -> None:
    prober = ConnectivityProber(remote.list_names, ActivityLog())

    assert prober.status == ConnectionStatus.CHECKING


def test_successful_probe_goes_online(host, remote: RemoteClient) -> None:
    log = ActivityLog()
    prober = ConnectivityProber(remote.list_names, log)

    assert asyncio.run(prober.check()) == ConnectionStatus.ONLINE
    assert [e.message for e in log] == ["Connected"]
    assert host.requests == [("/pedir-nomes", {})]


def test_failed_probe_goes_offline_and_logs(host, remote: RemoteClient) -> None:
    host.failing["/pedir-nomes"] = 500
    log = ActivityLog()
    prober = ConnectivityProber(remote.list_names, log)

    asyncio.run(prober.check())

    assert prober.status == ConnectionStatus.OFFLINE
    assert [e.message for e in log] == ["Offline"]


def test_unreachable_host_goes_offline(host, remote: RemoteClient) -> None:
    host.unreachable = True
    prober = ConnectivityProber(remote.list_names, ActivityLog())

    assert asyncio.run(prober.check()) == ConnectionStatus.OFFLINE


def test_new_probe_resets_to_checking_until_it_resolves() -> None:
    async def scenario() -> list[ConnectionStatus]:
        gate = asyncio.Event()

        async def probe() -> None:
            await gate.wait()

        prober = ConnectivityProber(probe, ActivityLog())
        prober.status = ConnectionStatus.OFFLINE
        seen = []

        task = prober.start()
        await asyncio.sleep(0)
        seen.append(prober.status)
        gate.set()
        await task
        seen.append(prober.status)
        return seen

    assert asyncio.run(scenario()) == [ConnectionStatus.CHECKING, ConnectionStatus.ONLINE]

"""End-to-end: sell offline, restart the register, sync when back online."""

import json

import pytest

from possync.application.services import build_terminal
from possync.config.settings import ConnectivitySettings, QueueSettings, Settings, SyncSettings
from possync.core.entities.ticket import TicketStatus
from possync.infrastructure.connectivity import ManualConnectivityProbe


def make_settings(tmp_path, backend: str = "file") -> Settings:
    return Settings(
        queue=QueueSettings(backend=backend, data_dir=tmp_path),
        connectivity=ConnectivitySettings(probe="manual"),
        sync=SyncSettings(backoff_initial=0.01, backoff_max=0.05),
    )


@pytest.mark.parametrize("backend", ["file", "sqlite"])
async def test_queue_survives_restart_and_syncs(tmp_path, gateway, sample_sale, backend):
    settings = make_settings(tmp_path, backend)

    offline = ManualConnectivityProbe(initial=False)
    register = build_terminal(settings, gateway=gateway, connectivity=offline)
    await register.start()
    results = [await register.service.submit_sale(sample_sale) for _ in range(3)]
    await register.stop()

    assert all(r.queued and r.persisted for r in results)
    assert gateway.calls == []

    probe = ManualConnectivityProbe(initial=False)
    restarted = build_terminal(settings, gateway=gateway, connectivity=probe)
    await restarted.start()
    try:
        snapshot = await restarted.reporter.refresh()
        assert snapshot.pending == 3

        probe.set_online(True)
        await restarted.watcher.wait_idle()

        tickets = {t.ticket_id: t for t in await restarted.ticket_store.list_all()}
    finally:
        await restarted.stop()

    ids = [r.ticket_id for r in results]
    assert sorted(gateway.sent_ticket_ids) == sorted(ids)
    assert [tickets[i].status for i in ids] == [TicketStatus.SYNCED] * 3
    assert sorted(tickets[i].invoice_no for i in ids) == [1001, 1002, 1003]


async def test_corrupt_queue_is_quarantined(tmp_path, gateway, sample_sale):
    settings = make_settings(tmp_path)
    register = build_terminal(settings, gateway=gateway, connectivity=ManualConnectivityProbe(False))
    key = register.ticket_store.key
    await register.kv_store.set(key, "{not json")

    await register.start()
    try:
        result = await register.service.submit_sale(sample_sale)
        pending = await register.ticket_store.list_pending()
    finally:
        await register.stop()

    assert [t.ticket_id for t in pending] == [result.ticket_id]
    quarantined = [p for p in tmp_path.iterdir() if ".corrupt." in p.name]
    assert len(quarantined) == 1
    assert json.loads((await register.kv_store.get(key)))[0]["ticketId"] == result.ticket_id

"""Tests for terminal wiring in the application layer."""

import pytest

from possync.application.services import (
    build_terminal,
    get_terminal,
    reset_terminal,
    set_terminal,
)
from possync.config.settings import (
    ConnectivitySettings,
    QueueSettings,
    Settings,
    SyncSettings,
)
from possync.infrastructure.connectivity import HttpConnectivityProbe, ManualConnectivityProbe
from possync.infrastructure.http import HttpSaleGateway
from possync.infrastructure.storage import (
    FileKeyValueStore,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
)


def make_settings(tmp_path, backend: str = "memory", probe: str = "manual", **sync) -> Settings:
    return Settings(
        queue=QueueSettings(backend=backend, data_dir=tmp_path),
        connectivity=ConnectivitySettings(probe=probe),
        sync=SyncSettings(**sync),
    )


@pytest.fixture(autouse=True)
def _no_global_terminal():
    reset_terminal()
    yield
    reset_terminal()


class TestBuildTerminal:
    @pytest.mark.parametrize(
        ("backend", "expected"),
        [
            ("memory", MemoryKeyValueStore),
            ("file", FileKeyValueStore),
            ("sqlite", SQLiteKeyValueStore),
        ],
    )
    def test_backend_selection(self, tmp_path, backend, expected):
        terminal = build_terminal(make_settings(tmp_path, backend=backend))
        assert isinstance(terminal.kv_store, expected)
        assert (terminal.database is not None) == (backend == "sqlite")

    def test_probe_selection(self, tmp_path):
        manual = build_terminal(make_settings(tmp_path, probe="manual"))
        http = build_terminal(make_settings(tmp_path, probe="http"))

        assert isinstance(manual.connectivity, ManualConnectivityProbe)
        assert manual.manual_connectivity is manual.connectivity
        assert isinstance(http.connectivity, HttpConnectivityProbe)
        assert http.manual_connectivity is None

    def test_default_gateway_is_http(self, tmp_path):
        terminal = build_terminal(make_settings(tmp_path))
        assert isinstance(terminal.gateway, HttpSaleGateway)

    def test_uses_configured_queue_key(self, tmp_path):
        settings = make_settings(tmp_path)
        settings.queue.storage_key = "register_7_queue"
        terminal = build_terminal(settings)
        assert terminal.ticket_store.key == "register_7_queue"

    async def test_write_failures_reach_reporter(self, tmp_path, gateway, kv, sample_sale):
        kv.fail_writes = True
        terminal = build_terminal(make_settings(tmp_path), gateway=gateway, kv_store=kv)
        terminal.connectivity.set_online(False)

        await terminal.service.submit_sale(sample_sale)

        assert [a.code for a in terminal.reporter.alerts] == ["STORAGE_WRITE_ERROR"]

    async def test_reconnect_triggers_auto_sync(self, tmp_path, gateway, sample_sale):
        terminal = build_terminal(make_settings(tmp_path), gateway=gateway)
        await terminal.start()
        terminal.connectivity.set_online(False)
        result = await terminal.service.submit_sale(sample_sale)

        terminal.connectivity.set_online(True)
        await terminal.watcher.wait_idle()

        assert gateway.sent_ticket_ids == [result.ticket_id]
        assert terminal.reporter.snapshot.synced == 1
        assert terminal.reporter.last_report.trigger == "online"
        await terminal.stop()

    async def test_auto_sync_can_be_disabled(self, tmp_path, gateway, sample_sale):
        settings = make_settings(tmp_path, auto_sync_on_reconnect=False)
        terminal = build_terminal(settings, gateway=gateway)
        await terminal.start()
        terminal.connectivity.set_online(False)
        await terminal.service.submit_sale(sample_sale)

        terminal.connectivity.set_online(True)
        await terminal.watcher.wait_idle()

        assert gateway.calls == []
        await terminal.stop()

    async def test_sqlite_terminal_lifecycle(self, tmp_path, gateway, sample_sale):
        terminal = build_terminal(make_settings(tmp_path, backend="sqlite"), gateway=gateway)
        await terminal.start()
        terminal.connectivity.set_online(False)
        result = await terminal.service.submit_sale(sample_sale)
        await terminal.stop()

        reopened = build_terminal(
            make_settings(tmp_path, backend="sqlite", auto_sync_on_reconnect=False), gateway=gateway
        )
        await reopened.start()
        pending = await reopened.ticket_store.list_pending()
        await reopened.stop()

        assert [t.ticket_id for t in pending] == [result.ticket_id]

    async def test_restart_online_drains_leftover_queue(self, tmp_path, gateway, sample_sale):
        terminal = build_terminal(make_settings(tmp_path, backend="file"), gateway=gateway)
        await terminal.start()
        terminal.connectivity.set_online(False)
        result = await terminal.service.submit_sale(sample_sale)
        await terminal.stop()

        reopened = build_terminal(make_settings(tmp_path, backend="file"), gateway=gateway)
        await reopened.start()
        await reopened.watcher.wait_idle()

        assert gateway.sent_ticket_ids == [result.ticket_id]
        assert (await reopened.ticket_store.get(result.ticket_id)).is_synced
        assert reopened.reporter.last_report.trigger == "startup"
        await reopened.stop()

    async def test_restart_offline_leaves_queue_alone(self, tmp_path, gateway, sample_sale):
        terminal = build_terminal(make_settings(tmp_path, backend="file"), gateway=gateway)
        terminal.connectivity.set_online(False)
        await terminal.service.submit_sale(sample_sale)

        reopened = build_terminal(make_settings(tmp_path, backend="file"), gateway=gateway)
        reopened.connectivity.set_online(False)
        await reopened.start()
        await reopened.watcher.wait_idle()

        assert gateway.calls == []
        assert reopened.reporter.snapshot.pending == 1
        await reopened.stop()


class TestGlobalTerminal:
    def test_singleton(self):
        assert get_terminal() is get_terminal()

    def test_set_and_reset(self, tmp_path):
        terminal = build_terminal(make_settings(tmp_path))
        set_terminal(terminal)
        assert get_terminal() is terminal

        reset_terminal()
        assert get_terminal() is not terminal

"""Pytest configuration and fixtures."""

import asyncio
import os
from typing import Any

# Keep tests off the disk and off the network unless a test opts in
os.environ.setdefault("QUEUE_BACKEND", "memory")
os.environ.setdefault("CONNECTIVITY_PROBE", "manual")

import pytest

from possync.config.settings import ReceiptSettings, reset_settings
from possync.core.entities.sale import Invoice, Sale, SaleConfirmation, SaleLine
from possync.core.exceptions import StorageReadError, StorageWriteError
from possync.core.interfaces import ISaleGateway
from possync.core.services import SaleSubmissionService
from possync.infrastructure.connectivity import ManualConnectivityProbe
from possync.infrastructure.storage import JsonTicketStore, MemoryKeyValueStore

START_MS = 1_718_000_000_000


class FakeClock:
    """Deterministic ms clock; every reading advances by step."""

    def __init__(self, start: int = START_MS, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


class FakeGateway(ISaleGateway):
    """
    Scriptable sale server.

    Outcomes are consumed in call order; an exception instance is raised,
    None means success. Per-ticket failures take priority over the script.
    """

    def __init__(self, first_invoice_no: int = 1001, delay: float = 0.0):
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.script: list[Exception | None] = []
        self.fail_for: dict[str, Exception] = {}
        self.next_invoice_no = first_invoice_no
        self.delay = delay

    def then(self, *outcomes: Exception | None) -> "FakeGateway":
        self.script.extend(outcomes)
        return self

    @property
    def sent_ticket_ids(self) -> list[str]:
        return [ticket_id for ticket_id, _ in self.calls]

    async def post_sale(self, payload: dict[str, Any], ticket_id: str) -> SaleConfirmation:
        self.calls.append((ticket_id, dict(payload)))
        if self.delay:
            await asyncio.sleep(self.delay)

        if ticket_id in self.fail_for:
            raise self.fail_for[ticket_id]
        outcome = self.script.pop(0) if self.script else None
        if outcome is not None:
            raise outcome

        invoice_no = self.next_invoice_no
        self.next_invoice_no += 1
        return SaleConfirmation(
            invoice=Invoice(invoice_no=invoice_no, id=f"inv-{invoice_no}"),
            ticket_id=ticket_id,
        )


class FlakyKeyValueStore(MemoryKeyValueStore):
    """Memory store whose reads or writes can be made to fail."""

    def __init__(self, initial: dict[str, str] | None = None):
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageReadError(key, "disk unavailable")
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(key, "quota exceeded")
        await super().set(key, value)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv() -> FlakyKeyValueStore:
    return FlakyKeyValueStore()


@pytest.fixture
def store(kv, clock) -> JsonTicketStore:
    return JsonTicketStore(kv, clock=clock)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def probe() -> ManualConnectivityProbe:
    return ManualConnectivityProbe(initial=True)


@pytest.fixture
def service(store, gateway, probe, clock) -> SaleSubmissionService:
    return SaleSubmissionService(store, gateway, probe, clock=clock)


@pytest.fixture
def receipt_settings() -> ReceiptSettings:
    return ReceiptSettings(
        store_name="GOKUL WHOLESALE",
        address_lines=["1141 W Bryn Mawr Ave"],
        phone="(630) 540-9910",
        footer_lines=["Thank you for your business!"],
        width=40,
        currency_symbol="$",
    )


@pytest.fixture
def sample_sale() -> Sale:
    """A two-line cash sale."""
    return Sale(
        items=[
            SaleLine(product_name="Basmati Rice 10kg", product_id="P-100", quantity=2, price=18.5),
            SaleLine(product_name="Ghee 1L", product_id="P-200", quantity=1, price=9.99),
        ],
        total=46.99,
        customer_name="Walk-in",
        payment_method="Cash",
    )


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """A stored sale payload as the register produces it."""
    return {
        "items": [{"productName": "Chai Masala", "quantity": 3, "price": 4.0}],
        "total": 12.0,
        "paymentMethod": "Card",
        "createdAt": "2024-06-10T09:30:00Z",
    }

"""Tests for ticket ID generation."""

import re

from possync.core.services.ticket_ids import (
    SUFFIX_LENGTH,
    generate_ticket_id,
    now_ms,
    ticket_suffix,
    ticket_timestamp,
)

TICKET_ID_RE = re.compile(r"^pos-\d+-[0-9a-z]{6}$")


class TestGenerateTicketId:
    def test_format(self):
        assert TICKET_ID_RE.match(generate_ticket_id())

    def test_embeds_given_timestamp(self):
        ticket_id = generate_ticket_id(now=1718000000000, randbelow=lambda n: 0)
        assert ticket_id == "pos-1718000000000-000000"

    def test_uses_random_source_for_suffix(self):
        values = iter([10, 11, 12, 35, 0, 1])
        ticket_id = generate_ticket_id(now=5, randbelow=lambda n: next(values))
        assert ticket_suffix(ticket_id) == "abcz01"

    def test_ids_are_unique(self):
        ids = {generate_ticket_id(now=1) for _ in range(1000)}
        assert len(ids) == 1000

    def test_default_timestamp_is_now(self):
        before = now_ms()
        ticket_id = generate_ticket_id()
        assert before <= ticket_timestamp(ticket_id) <= now_ms()


class TestTicketIdParts:
    def test_suffix(self):
        assert ticket_suffix("pos-1718000000000-k3x9ab") == "k3x9ab"
        assert len(ticket_suffix(generate_ticket_id())) == SUFFIX_LENGTH

    def test_suffix_of_foreign_id(self):
        assert ticket_suffix("legacy") == "legacy"

    def test_timestamp(self):
        assert ticket_timestamp("pos-1718000000000-k3x9ab") == 1718000000000

    def test_timestamp_of_foreign_id(self):
        assert ticket_timestamp("abc") is None
        assert ticket_timestamp("pos-notanumber-abc") is None
        assert ticket_timestamp("web-1-abc") is None

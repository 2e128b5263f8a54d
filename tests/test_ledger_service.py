"""Tests for client and invoice bookkeeping over the in-memory store."""

from decimal import Decimal

import pytest

from app.domain.errors import InvalidGSTINError, NotFoundError, ValidationError
from app.domain.models.ledger import SalesInvoice
from app.domain.services import ledger_service
from app.infrastructure.db.repositories import ChangeFeed, MemoryLedgerRepository

OWNER = "user-1"


def _add_client(event_loop, store, name="Bharat Steels", gstin="27AAACB1234C1Z5"):
    return event_loop.run_until_complete(ledger_service.add_client(store, OWNER, name, gstin))


class TestClients:

    def test_add_and_list(self, event_loop, memory_store):
        client = _add_client(event_loop, memory_store, gstin=" 27aaacb1234c1z5 ")
        assert client.gstin == "27AAACB1234C1Z5"
        assert client.owner_id == OWNER

        listed = event_loop.run_until_complete(ledger_service.list_clients(memory_store, OWNER))
        assert [c.id for c in listed] == [client.id]

    def test_other_owner_sees_nothing(self, event_loop, memory_store):
        client = _add_client(event_loop, memory_store)
        assert event_loop.run_until_complete(ledger_service.list_clients(memory_store, "user-2")) == []
        with pytest.raises(NotFoundError):
            event_loop.run_until_complete(ledger_service.get_client(memory_store, "user-2", client.id))

    def test_name_required(self, event_loop, memory_store):
        with pytest.raises(ValidationError) as exc_info:
            _add_client(event_loop, memory_store, name="   ")
        assert exc_info.value.field == "name"

    def test_bad_gstin_rejected(self, event_loop, memory_store):
        with pytest.raises(InvalidGSTINError):
            _add_client(event_loop, memory_store, gstin="27AAACB")

    def test_delete_leaves_invoices_behind(self, event_loop, memory_store, make_sales_invoice):
        client = _add_client(event_loop, memory_store)
        event_loop.run_until_complete(
            ledger_service.add_sales_invoice(memory_store, OWNER, client.id, make_sales_invoice())
        )

        event_loop.run_until_complete(ledger_service.delete_client(memory_store, OWNER, client.id))

        with pytest.raises(NotFoundError):
            event_loop.run_until_complete(ledger_service.get_client(memory_store, OWNER, client.id))
        orphans = event_loop.run_until_complete(memory_store.list_sales_invoices(OWNER, client.id))
        assert len(orphans) == 1

    def test_delete_unknown_client(self, event_loop, memory_store):
        with pytest.raises(NotFoundError):
            event_loop.run_until_complete(ledger_service.delete_client(memory_store, OWNER, "nope"))


class TestValidateSalesInvoice:

    def test_cleans_fields(self, make_sales_invoice):
        inv = ledger_service.validate_sales_invoice(
            make_sales_invoice(invoice_number=" INV-9 ", customer_gstin=" 07aaaca1111a1z1 ", place_of_supply=" 07")
        )
        assert inv.invoice_number == "INV-9"
        assert inv.customer_gstin == "07AAACA1111A1Z1"
        assert inv.place_of_supply == "07"

    def test_blank_customer_gstin_becomes_b2c(self, make_sales_invoice):
        assert ledger_service.validate_sales_invoice(make_sales_invoice(customer_gstin="  ")).customer_gstin is None

    def test_invoice_value_below_taxable(self, make_sales_invoice):
        with pytest.raises(ValidationError) as exc_info:
            ledger_service.validate_sales_invoice(make_sales_invoice(invoice_value=Decimal("999")))
        assert exc_info.value.field == "invoice_value"

    def test_zero_tax_is_allowed(self, make_sales_invoice):
        inv = ledger_service.validate_sales_invoice(make_sales_invoice(invoice_value=Decimal("1000")))
        assert inv.invoice_value == inv.taxable_value

    @pytest.mark.parametrize("overrides, field", [
        ({"invoice_number": " "}, "invoice_number"),
        ({"invoice_date": "31-02-2024"}, "invoice_date"),
        ({"invoice_date": None}, "invoice_date"),
        ({"place_of_supply": "7"}, "place_of_supply"),
        ({"place_of_supply": "MH"}, "place_of_supply"),
        ({"taxable_value": Decimal("-1"), "invoice_value": Decimal("0")}, "taxable_value"),
    ])
    def test_rejects(self, make_sales_invoice, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            ledger_service.validate_sales_invoice(make_sales_invoice(**overrides))
        assert exc_info.value.field == field

    def test_store_records_validate_from_camel_case(self):
        inv = SalesInvoice.model_validate({
            "invoiceNumber": "INV-7",
            "customerGstin": "07AAACA1111A1Z1",
            "placeOfSupply": "07",
            "invoiceDate": "2024-04-01",
            "invoiceValue": 1180,
            "taxableValue": 1000,
            "gstRate": 18,
        })
        assert inv.invoice_value == Decimal("1180")
        assert ledger_service.validate_sales_invoice(inv).invoice_number == "INV-7"


class TestSalesInvoices:

    def test_add_list_delete(self, event_loop, memory_store, make_sales_invoice):
        client = _add_client(event_loop, memory_store)
        saved = event_loop.run_until_complete(
            ledger_service.add_sales_invoice(memory_store, OWNER, client.id, make_sales_invoice())
        )
        assert saved.id and saved.created_at

        listed = event_loop.run_until_complete(ledger_service.list_sales_invoices(memory_store, OWNER, client.id))
        assert [i.id for i in listed] == [saved.id]

        event_loop.run_until_complete(ledger_service.delete_sales_invoice(memory_store, OWNER, client.id, saved.id))
        assert event_loop.run_until_complete(
            ledger_service.list_sales_invoices(memory_store, OWNER, client.id)
        ) == []

    def test_unknown_client(self, event_loop, memory_store, make_sales_invoice):
        with pytest.raises(NotFoundError):
            event_loop.run_until_complete(
                ledger_service.add_sales_invoice(memory_store, OWNER, "missing", make_sales_invoice())
            )

    def test_delete_unknown_invoice(self, event_loop, memory_store):
        client = _add_client(event_loop, memory_store)
        with pytest.raises(NotFoundError):
            event_loop.run_until_complete(
                ledger_service.delete_sales_invoice(memory_store, OWNER, client.id, "missing")
            )

    def test_invalid_invoice_is_not_stored(self, event_loop, memory_store, make_sales_invoice):
        client = _add_client(event_loop, memory_store)
        with pytest.raises(ValidationError):
            event_loop.run_until_complete(
                ledger_service.add_sales_invoice(
                    memory_store, OWNER, client.id, make_sales_invoice(place_of_supply="")
                )
            )
        assert event_loop.run_until_complete(memory_store.list_sales_invoices(OWNER, client.id)) == []


class TestWatchSalesInvoices:

    def test_notified_on_every_write_until_unsubscribed(self, event_loop, make_sales_invoice):
        feed = ChangeFeed()
        store = MemoryLedgerRepository(feed=feed)
        client = _add_client(event_loop, store)
        calls = []

        unsubscribe = ledger_service.watch_sales_invoices(store, OWNER, client.id, lambda: calls.append(1))
        saved = event_loop.run_until_complete(
            ledger_service.add_sales_invoice(store, OWNER, client.id, make_sales_invoice())
        )
        event_loop.run_until_complete(ledger_service.delete_sales_invoice(store, OWNER, client.id, saved.id))
        assert len(calls) == 2

        unsubscribe()
        assert feed.subscriber_count(("sales", OWNER, client.id)) == 0
        event_loop.run_until_complete(
            ledger_service.add_sales_invoice(store, OWNER, client.id, make_sales_invoice())
        )
        assert len(calls) == 2

    def test_purchase_writes_do_not_notify_sales_watchers(self, event_loop, make_purchase_invoice):
        store = MemoryLedgerRepository()
        client = _add_client(event_loop, store)
        calls = []
        ledger_service.watch_sales_invoices(store, OWNER, client.id, lambda: calls.append(1))

        event_loop.run_until_complete(
            ledger_service.add_purchase_invoice(store, OWNER, client.id, make_purchase_invoice())
        )
        assert calls == []

    def test_failing_subscriber_does_not_break_the_write(self, event_loop, make_sales_invoice):
        store = MemoryLedgerRepository()
        client = _add_client(event_loop, store)

        def boom():
            raise RuntimeError("listener failed")

        ledger_service.watch_sales_invoices(store, OWNER, client.id, boom)
        saved = event_loop.run_until_complete(
            ledger_service.add_sales_invoice(store, OWNER, client.id, make_sales_invoice())
        )
        assert saved.id


class TestPurchaseInvoices:

    def test_add_list_delete(self, event_loop, memory_store, make_purchase_invoice):
        client = _add_client(event_loop, memory_store)
        saved = event_loop.run_until_complete(
            ledger_service.add_purchase_invoice(
                memory_store, OWNER, client.id, make_purchase_invoice(supplier_gstin="27aaacz2222b1z2")
            )
        )
        assert saved.supplier_gstin == "27AAACZ2222B1Z2"

        listed = event_loop.run_until_complete(ledger_service.list_purchase_invoices(memory_store, OWNER, client.id))
        assert [p.id for p in listed] == [saved.id]

        event_loop.run_until_complete(
            ledger_service.delete_purchase_invoice(memory_store, OWNER, client.id, saved.id)
        )
        with pytest.raises(NotFoundError):
            event_loop.run_until_complete(
                ledger_service.delete_purchase_invoice(memory_store, OWNER, client.id, saved.id)
            )

    @pytest.mark.parametrize("overrides", [
        {"invoice_number": ""},
        {"invoice_date": "someday"},
        {"taxable_value": Decimal("-5")},
        {"itc_claimed": Decimal("-1")},
    ])
    def test_rejects(self, make_purchase_invoice, overrides):
        with pytest.raises(ValidationError):
            ledger_service.validate_purchase_invoice(make_purchase_invoice(**overrides))

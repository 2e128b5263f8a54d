# app/infrastructure/db/repositories/memory_ledger.py
"""Dict-backed ledger store for tests, demos and local runs without a database."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable

from app.domain.models.ledger import Client, PurchaseInvoice, SalesInvoice
from app.infrastructure.db.repositories.change_feed import (
    ChangeFeed,
    purchases_key,
    sales_key,
)


def _newest_first(records: list) -> list:
    return sorted(records, key=lambda r: r.created_at, reverse=True)


class MemoryLedgerRepository:
    def __init__(self, feed: ChangeFeed | None = None) -> None:
        self.feed = feed or ChangeFeed()
        self._clients: dict[str, Client] = {}
        # (owner_id, client_id) -> invoice_id -> invoice
        self._sales: dict[tuple[str, str], dict[str, SalesInvoice]] = {}
        self._purchases: dict[tuple[str, str], dict[str, PurchaseInvoice]] = {}

    @staticmethod
    def _stamp(record):
        return record.model_copy(update={
            "id": str(uuid.uuid4()),
            "created_at": datetime.now(timezone.utc),
        })

    # ---------- clients ----------

    async def list_clients(self, owner_id: str) -> list[Client]:
        return _newest_first([c for c in self._clients.values() if c.owner_id == owner_id])

    async def get_client(self, owner_id: str, client_id: str) -> Client | None:
        client = self._clients.get(client_id)
        if client is None or client.owner_id != owner_id:
            return None
        return client

    async def add_client(self, owner_id: str, name: str, gstin: str) -> Client:
        client = Client(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=name,
            gstin=gstin,
            created_at=datetime.now(timezone.utc),
        )
        self._clients[client.id] = client
        return client

    async def delete_client(self, owner_id: str, client_id: str) -> bool:
        if await self.get_client(owner_id, client_id) is None:
            return False
        # invoices are left in place
        del self._clients[client_id]
        return True

    # ---------- sales invoices ----------

    async def list_sales_invoices(self, owner_id: str, client_id: str) -> list[SalesInvoice]:
        return _newest_first(list(self._sales.get((owner_id, client_id), {}).values()))

    async def add_sales_invoice(self, owner_id: str, client_id: str, invoice: SalesInvoice) -> SalesInvoice:
        saved = self._stamp(invoice)
        self._sales.setdefault((owner_id, client_id), {})[saved.id] = saved
        self.feed.publish(sales_key(owner_id, client_id))
        return saved

    async def delete_sales_invoice(self, owner_id: str, client_id: str, invoice_id: str) -> bool:
        invoices = self._sales.get((owner_id, client_id), {})
        if invoices.pop(invoice_id, None) is None:
            return False
        self.feed.publish(sales_key(owner_id, client_id))
        return True

    def watch_sales_invoices(self, owner_id: str, client_id: str, on_change: Callable[[], None]):
        return self.feed.subscribe(sales_key(owner_id, client_id), on_change)

    # ---------- purchase invoices ----------

    async def list_purchase_invoices(self, owner_id: str, client_id: str) -> list[PurchaseInvoice]:
        return _newest_first(list(self._purchases.get((owner_id, client_id), {}).values()))

    async def add_purchase_invoice(
        self, owner_id: str, client_id: str, invoice: PurchaseInvoice
    ) -> PurchaseInvoice:
        saved = self._stamp(invoice)
        self._purchases.setdefault((owner_id, client_id), {})[saved.id] = saved
        self.feed.publish(purchases_key(owner_id, client_id))
        return saved

    async def delete_purchase_invoice(self, owner_id: str, client_id: str, invoice_id: str) -> bool:
        invoices = self._purchases.get((owner_id, client_id), {})
        if invoices.pop(invoice_id, None) is None:
            return False
        self.feed.publish(purchases_key(owner_id, client_id))
        return True

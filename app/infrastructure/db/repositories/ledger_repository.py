# app/infrastructure/db/repositories/ledger_repository.py
"""SQLAlchemy implementation of the ledger store (clients, sales, purchases)."""

from __future__ import annotations

import uuid
from typing import Callable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models.ledger import Client, PurchaseInvoice, SalesInvoice
from app.domain.services.gst_period import parse_invoice_date
from app.infrastructure.db import models
from app.infrastructure.db.repositories.change_feed import (
    ChangeFeed,
    purchases_key,
    sales_key,
)


class LedgerRepository:
    def __init__(self, db: AsyncSession, feed: ChangeFeed) -> None:
        self.db = db
        self.feed = feed

    # ---------- mapping ----------

    @staticmethod
    def _client(row: models.Client) -> Client:
        return Client(
            id=row.id,
            owner_id=row.owner_id,
            name=row.name,
            gstin=row.gstin,
            created_at=row.created_at,
        )

    @staticmethod
    def _sales(row: models.SalesInvoice) -> SalesInvoice:
        return SalesInvoice(
            id=row.id,
            invoice_number=row.invoice_number,
            customer_name=row.customer_name or "",
            customer_gstin=row.customer_gstin,
            place_of_supply=row.place_of_supply,
            invoice_date=row.invoice_date,
            invoice_value=row.invoice_value,
            taxable_value=row.taxable_value,
            gst_rate=row.gst_rate,
            created_at=row.created_at,
        )

    @staticmethod
    def _purchase(row: models.PurchaseInvoice) -> PurchaseInvoice:
        return PurchaseInvoice(
            id=row.id,
            invoice_number=row.invoice_number,
            supplier_name=row.supplier_name or "",
            supplier_gstin=row.supplier_gstin,
            invoice_date=row.invoice_date,
            taxable_value=row.taxable_value,
            itc_claimed=row.itc_claimed,
            created_at=row.created_at,
        )

    # ---------- clients ----------

    async def list_clients(self, owner_id: str) -> list[Client]:
        result = await self.db.execute(
            select(models.Client)
            .where(models.Client.owner_id == owner_id)
            .order_by(models.Client.created_at.desc())
        )
        return [self._client(r) for r in result.scalars().all()]

    async def get_client(self, owner_id: str, client_id: str) -> Client | None:
        result = await self.db.execute(
            select(models.Client).where(
                models.Client.id == client_id,
                models.Client.owner_id == owner_id,
            )
        )
        row = result.scalar_one_or_none()
        return self._client(row) if row else None

    async def add_client(self, owner_id: str, name: str, gstin: str) -> Client:
        row = models.Client(id=str(uuid.uuid4()), owner_id=owner_id, name=name, gstin=gstin)
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return self._client(row)

    async def delete_client(self, owner_id: str, client_id: str) -> bool:
        # client row only; sales_invoices / purchase_invoices are not touched
        result = await self.db.execute(
            delete(models.Client).where(
                models.Client.id == client_id,
                models.Client.owner_id == owner_id,
            )
        )
        await self.db.commit()
        return result.rowcount > 0

    # ---------- sales invoices ----------

    async def list_sales_invoices(self, owner_id: str, client_id: str) -> list[SalesInvoice]:
        result = await self.db.execute(
            select(models.SalesInvoice)
            .where(
                models.SalesInvoice.owner_id == owner_id,
                models.SalesInvoice.client_id == client_id,
            )
            .order_by(models.SalesInvoice.created_at.desc())
        )
        return [self._sales(r) for r in result.scalars().all()]

    async def add_sales_invoice(self, owner_id: str, client_id: str, invoice: SalesInvoice) -> SalesInvoice:
        row = models.SalesInvoice(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            client_id=client_id,
            invoice_number=invoice.invoice_number,
            customer_name=invoice.customer_name,
            customer_gstin=invoice.customer_gstin,
            place_of_supply=invoice.place_of_supply,
            invoice_date=parse_invoice_date(invoice.invoice_date),
            invoice_value=invoice.invoice_value,
            taxable_value=invoice.taxable_value,
            gst_rate=invoice.gst_rate,
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        self.feed.publish(sales_key(owner_id, client_id))
        return self._sales(row)

    async def delete_sales_invoice(self, owner_id: str, client_id: str, invoice_id: str) -> bool:
        result = await self.db.execute(
            delete(models.SalesInvoice).where(
                models.SalesInvoice.id == invoice_id,
                models.SalesInvoice.owner_id == owner_id,
                models.SalesInvoice.client_id == client_id,
            )
        )
        await self.db.commit()
        if result.rowcount == 0:
            return False
        self.feed.publish(sales_key(owner_id, client_id))
        return True

    def watch_sales_invoices(self, owner_id: str, client_id: str, on_change: Callable[[], None]):
        return self.feed.subscribe(sales_key(owner_id, client_id), on_change)

    # ---------- purchase invoices ----------

    async def list_purchase_invoices(self, owner_id: str, client_id: str) -> list[PurchaseInvoice]:
        result = await self.db.execute(
            select(models.PurchaseInvoice)
            .where(
                models.PurchaseInvoice.owner_id == owner_id,
                models.PurchaseInvoice.client_id == client_id,
            )
            .order_by(models.PurchaseInvoice.created_at.desc())
        )
        return [self._purchase(r) for r in result.scalars().all()]

    async def add_purchase_invoice(
        self, owner_id: str, client_id: str, invoice: PurchaseInvoice
    ) -> PurchaseInvoice:
        row = models.PurchaseInvoice(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            client_id=client_id,
            invoice_number=invoice.invoice_number,
            supplier_name=invoice.supplier_name,
            supplier_gstin=invoice.supplier_gstin,
            invoice_date=parse_invoice_date(invoice.invoice_date),
            taxable_value=invoice.taxable_value,
            itc_claimed=invoice.itc_claimed,
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        self.feed.publish(purchases_key(owner_id, client_id))
        return self._purchase(row)

    async def delete_purchase_invoice(self, owner_id: str, client_id: str, invoice_id: str) -> bool:
        result = await self.db.execute(
            delete(models.PurchaseInvoice).where(
                models.PurchaseInvoice.id == invoice_id,
                models.PurchaseInvoice.owner_id == owner_id,
                models.PurchaseInvoice.client_id == client_id,
            )
        )
        await self.db.commit()
        if result.rowcount == 0:
            return False
        self.feed.publish(purchases_key(owner_id, client_id))
        return True

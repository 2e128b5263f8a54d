import uuid

from sqlalchemy import Column, String, DateTime, Date, Numeric, text

from app.infrastructure.db.base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Client(Base):
    __tablename__ = "clients"
    id = Column(String(36), primary_key=True, default=_uuid)
    # subject of the identity provider's token
    owner_id = Column(String(128), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    gstin = Column(String(15), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))


# client_id is a plain indexed column, not a foreign key: deleting a client
# must succeed and leave its invoices behind for a later cleanup job.

class SalesInvoice(Base):
    __tablename__ = "sales_invoices"
    id = Column(String(36), primary_key=True, default=_uuid)
    owner_id = Column(String(128), nullable=False, index=True)
    client_id = Column(String(36), nullable=False, index=True)
    invoice_number = Column(String(50), nullable=False)
    customer_name = Column(String(255), nullable=False, default="")
    customer_gstin = Column(String(20))
    place_of_supply = Column(String(2), nullable=False)
    invoice_date = Column(Date, nullable=False)
    invoice_value = Column(Numeric(14, 2), nullable=False)
    taxable_value = Column(Numeric(14, 2), nullable=False)
    gst_rate = Column(Numeric(5, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))


class PurchaseInvoice(Base):
    __tablename__ = "purchase_invoices"
    id = Column(String(36), primary_key=True, default=_uuid)
    owner_id = Column(String(128), nullable=False, index=True)
    client_id = Column(String(36), nullable=False, index=True)
    invoice_number = Column(String(50), nullable=False)
    supplier_name = Column(String(255), nullable=False, default="")
    supplier_gstin = Column(String(20))
    invoice_date = Column(Date, nullable=False)
    taxable_value = Column(Numeric(14, 2), nullable=False)
    itc_claimed = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))

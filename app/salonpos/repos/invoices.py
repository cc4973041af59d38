from __future__ import annotations

from sqlalchemy import select

from app.salonpos.db.models import Invoice, InvoiceItem, InvoicePayment


class InvoiceRepository:
    def __init__(self, db):
        self.db = db

    def last_invoice_number(self, *, branch_id: str, prefix: str) -> str | None:
        stmt = (
            select(Invoice.invoice_number)
            .where(Invoice.branch_id == branch_id, Invoice.invoice_number.like(f"{prefix}%"))
            .order_by(Invoice.invoice_number.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def create(self, invoice: Invoice, items: list[InvoiceItem], payments: list[InvoicePayment]) -> Invoice:
        self.db.add(invoice)
        self.db.flush()
        for item in items:
            item.invoice_id = invoice.id
            self.db.add(item)
        for payment in payments:
            payment.invoice_id = invoice.id
            self.db.add(payment)
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

from __future__ import annotations

from sqlalchemy import text

from plansync.application.ports.tenant_billing_port import TenantBillingPort
from plansync.domain.entities.tenant import TenantBillingRecord
from plansync.infrastructure.db.mappers.billing_mapper import map_row_to_tenant_billing_record


class SqlTenantBillingRepository(TenantBillingPort):
    def __init__(self, engine):
        self._engine = engine

    def get_tenant_billing_record(self, *, tenant_id: str) -> TenantBillingRecord | None:
        sql = """
            SELECT tenant_id, stripe_customer_id
            FROM public.tenant_billing_records
            WHERE tenant_id = :tenant_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"tenant_id": tenant_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_tenant_billing_record(row)

    def save_customer_id(self, *, tenant_id: str, customer_id: str) -> str:
        # First writer wins: an id already on file is never replaced.
        sql = """
            INSERT INTO public.tenant_billing_records (tenant_id, stripe_customer_id)
            VALUES (:tenant_id, :stripe_customer_id)
            ON CONFLICT (tenant_id) DO UPDATE
            SET stripe_customer_id = COALESCE(
                    public.tenant_billing_records.stripe_customer_id,
                    EXCLUDED.stripe_customer_id
                ),
                updated_at = now()
            RETURNING tenant_id, stripe_customer_id
        """
        with self._engine.begin() as conn:
            row = conn.execute(
                text(sql),
                {
                    "tenant_id": tenant_id,
                    "stripe_customer_id": customer_id,
                },
            ).mappings().one()
        return map_row_to_tenant_billing_record(row).customer_id or customer_id

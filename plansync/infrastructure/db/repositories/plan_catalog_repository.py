from __future__ import annotations

import json

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from plansync.application.ports.plan_catalog_port import PlanCatalogPort
from plansync.domain.entities.plan import PlanDefinition, PlanSyncState
from plansync.domain.exceptions import CatalogWriteError
from plansync.infrastructure.db.mappers.billing_mapper import map_row_to_plan_definition


_PLAN_COLUMNS = """
    id, name, description, monthly_amount, annual_amount, features, is_featured, is_archived,
    stripe_product_id, stripe_price_id_monthly, stripe_price_id_annually, stripe_last_sync_at
"""


class SqlPlanCatalogRepository(PlanCatalogPort):
    def __init__(self, engine):
        self._engine = engine

    def get_plan_by_id(self, *, plan_id: str) -> PlanDefinition | None:
        sql = f"""
            SELECT {_PLAN_COLUMNS}
            FROM public.subscription_plans
            WHERE id = :plan_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"plan_id": plan_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_plan_definition(row)

    def list_plans(self, *, include_archived: bool) -> list[PlanDefinition]:
        sql = f"""
            SELECT {_PLAN_COLUMNS}
            FROM public.subscription_plans
            WHERE (:include_archived OR is_archived = false)
            ORDER BY monthly_amount ASC, id ASC
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"include_archived": include_archived}).mappings().all()
        return [map_row_to_plan_definition(row) for row in rows]

    def merge_plan_sync_state(self, *, plan: PlanDefinition, state: PlanSyncState) -> None:
        # Existing rows only get the provider columns updated.
        sql = """
            INSERT INTO public.subscription_plans (
                id, name, description, monthly_amount, annual_amount, features, is_featured, is_archived,
                stripe_product_id, stripe_price_id_monthly, stripe_price_id_annually, stripe_last_sync_at
            ) VALUES (
                :id, :name, :description, :monthly_amount, :annual_amount, CAST(:features AS jsonb),
                :is_featured, :is_archived,
                :stripe_product_id, :stripe_price_id_monthly, :stripe_price_id_annually, :stripe_last_sync_at
            )
            ON CONFLICT (id) DO UPDATE
            SET stripe_product_id = EXCLUDED.stripe_product_id,
                stripe_price_id_monthly = EXCLUDED.stripe_price_id_monthly,
                stripe_price_id_annually = EXCLUDED.stripe_price_id_annually,
                stripe_last_sync_at = EXCLUDED.stripe_last_sync_at,
                updated_at = now()
        """
        params = {
            "id": plan.id,
            "name": plan.name,
            "description": plan.description,
            "monthly_amount": plan.monthly_amount,
            "annual_amount": plan.annual_amount,
            "features": json.dumps(list(plan.features)),
            "is_featured": plan.is_featured,
            "is_archived": plan.is_archived,
            "stripe_product_id": state.product_id,
            "stripe_price_id_monthly": state.price_id_monthly,
            "stripe_price_id_annually": state.price_id_annually,
            "stripe_last_sync_at": state.last_synced_at,
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(text(sql), params)
        except SQLAlchemyError as exc:
            raise CatalogWriteError(f"Failed to save sync state for plan '{plan.id}'.") from exc

"""
Accès aux données pour la caisse (tables payments et cash_payments, append-only).
"""
from typing import Dict, Any
import logging
import catering.infra.supabase_client as supabase_client
from catering.payments.errors import StorageError

logger = logging.getLogger(__name__)

def _insert(table: str, row: Dict[str, Any]) -> Dict[str, Any]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(table)
            .insert(row)
            .execute()
        )
    except Exception as e:
        logger.exception("cashier.repository insert failed table=%s order_id=%s", table, row.get("order_id"))
        raise StorageError(f"Failed to insert into {table}: {e}")
    rows = res.data or []
    return rows[0] if rows else row

def insert_payment(row: Dict[str, Any]) -> Dict[str, Any]:
    """Tentative de règlement (méthode, statut, transaction_id, montant)."""
    return _insert("payments", row)

def insert_cash_payment(row: Dict[str, Any]) -> Dict[str, Any]:
    """Trace caisse: montant dû, reçu, rendu, caissier, notes."""
    return _insert("cash_payments", row)

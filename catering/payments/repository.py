"""
Accès aux données pour la feature 'payments' (table batch_orders).
"""
from typing import List
import logging
import catering.infra.supabase_client as supabase_client
from .errors import StorageError

logger = logging.getLogger(__name__)

# module catering.payments.repository
def insert_batch_mappings(batch_id: str, order_ids: List[str]) -> bool:
    """
    Enregistre une ligne batch_orders {batch_id, order_id} par commande réelle.
    - Store non configuré: avertissement, retourne False (checkout poursuivi sans suivi batch).
    - Échec d'insertion: StorageError (la passerelle ne doit pas être appelée).
    """
    if not supabase_client.service_supabase_configured():
        logger.warning(
            "Supabase configuration missing for batch mapping batch_id=%s orders=%s",
            batch_id, len(order_ids),
        )
        return False
    rows = [{"batch_id": batch_id, "order_id": oid} for oid in order_ids]
    try:
        (
            supabase_client.get_service_supabase()
            .table("batch_orders")
            .insert(rows)
            .execute()
        )
    except Exception as e:
        logger.exception("payments.repository.insert_batch_mappings failed batch_id=%s", batch_id)
        raise StorageError(f"Failed to save batch mapping: {e}")
    logger.info("Batch mapping saved batch_id=%s orders=%s", batch_id, len(rows))
    return True

def fetch_batch_order_ids(batch_id: str) -> List[str]:
    """Ids des commandes réelles rattachées à un batch (corrélation d'un callback passerelle)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("batch_orders")
            .select("order_id")
            .eq("batch_id", batch_id)
            .execute()
        )
        return [str(r.get("order_id")) for r in (res.data or [])]
    except Exception:
        logger.exception("payments.repository.fetch_batch_order_ids failed batch_id=%s", batch_id)
        return []

"""
Accès au store des commandes (tables orders et order_line_items).

Les écritures critiques (création de commande, lignes, mise à jour) lèvent
StorageError: l'appelant décide si l'échec est fatal ou seulement journalisé.
Les lectures retournent None / [] en cas d'erreur (journalisée).
"""
from typing import List, Dict, Any, Optional
import logging
import catering.infra.supabase_client as supabase_client
from catering.payments.errors import StorageError

logger = logging.getLogger(__name__)

ORDER_SELECT = (
    "*, order_line_items(id, order_id, child_id, child_name, child_class, menu_item_id, "
    "quantity, unit_price, total_price, delivery_date, order_date, notes, menu_items(name))"
)

# module catering.orders.repository
def insert_order(row: Dict[str, Any]) -> Dict[str, Any]:
    """Insère une commande et retourne la ligne créée (avec son id)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .insert(row)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.insert_order failed order_number=%s", row.get("order_number"))
        raise StorageError(f"Impossible de créer la commande: {e}")
    rows = res.data or []
    if not rows:
        raise StorageError("Impossible de créer la commande: aucune ligne retournée")
    return rows[0]

def insert_line_items(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Insère toutes les lignes d'une commande en une requête (total_price calculé par le store)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("order_line_items")
            .insert(rows)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("orders.repository.insert_line_items failed count=%s", len(rows))
        raise StorageError(f"Impossible d'enregistrer le détail de la commande: {e}")

def delete_order(order_id: str) -> bool:
    """Suppression compensatoire (rollback de checkout); retourne False si elle échoue."""
    try:
        (
            supabase_client.get_service_supabase()
            .table("orders")
            .delete()
            .eq("id", order_id)
            .execute()
        )
        return True
    except Exception:
        logger.exception("orders.repository.delete_order failed order_id=%s", order_id)
        return False

def update_order(order_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Met à jour une commande par id; lève StorageError si le store refuse."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .update(fields)
            .eq("id", order_id)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.update_order failed order_id=%s fields=%s", order_id, list(fields))
        raise StorageError(f"Failed to update order {order_id}: {e}")
    rows = res.data or []
    return rows[0] if rows else None

def fetch_order(order_id: str) -> Optional[Dict[str, Any]]:
    """Commande + lignes (jointure menu_items) ou None."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDER_SELECT)
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("orders.repository.fetch_order failed order_id=%s", order_id)
        return None

def fetch_orders_by_ids(ids: List[str], user_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """Commandes par ids (optionnellement restreintes au propriétaire)."""
    if not ids:
        return []
    try:
        query = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDER_SELECT)
            .in_("id", [str(i) for i in ids])
        )
        if user_id:
            query = query.eq("user_id", user_id)
        res = query.execute()
        return res.data or []
    except Exception:
        logger.exception("orders.repository.fetch_orders_by_ids failed ids=%s", ids)
        return []

def fetch_user_orders(user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
    """Commandes de l'utilisateur connecté, plus récentes d'abord."""
    if not user_id:
        return []
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDER_SELECT)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("orders.repository.fetch_user_orders failed user_id=%s", user_id)
        return []

def fetch_pending_orders(child_name: Optional[str] = None, limit: int = 50) -> List[Dict[str, Any]]:
    """Commandes payment_status=pending (recherche caisse par nom d'enfant, insensible à la casse)."""
    try:
        query = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDER_SELECT)
            .eq("payment_status", "pending")
        )
        if child_name:
            query = query.ilike("child_name", f"%{child_name}%")
        res = query.order("created_at", desc=True).limit(limit).execute()
        return res.data or []
    except Exception:
        logger.exception("orders.repository.fetch_pending_orders failed child_name=%s", child_name)
        return []

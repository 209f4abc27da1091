"""Couche service des commandes côté parent.
Rôles:
- Lire les commandes de l'utilisateur (rafraîchissement après le widget Snap).
- Relancer un paiement: réutiliser le token en cache, sinon en générer un nouveau.
- Tracer les callbacks du widget sans jamais modifier payment_status (lecture faiblement cohérente:
  seule la notification serveur de la passerelle, hors de ce service, fait foi).
"""
from typing import Dict, Any, List, Optional
import logging

from fastapi import HTTPException

from catering.orders import repository
from catering.orders.helpers import is_pending, order_item_details, customer_details_for_user
from catering.payments import service as payments_service
from catering.payments import repository as payments_repository
from catering.payments.errors import StorageError
from catering.utils.references import order_reference

logger = logging.getLogger(__name__)

WIDGET_EVENTS = ("success", "pending", "error", "close")

def list_user_orders(user_id: str) -> List[Dict[str, Any]]:
    return repository.fetch_user_orders(user_id)

def get_user_order(order_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    """Commande appartenant à l'utilisateur; 404 sinon (pas de fuite d'existence)."""
    order = repository.fetch_order(order_id)
    if not order or str(order.get("user_id")) != str(user.get("id")):
        raise HTTPException(status_code=404, detail="Commande introuvable")
    return order

def get_user_orders_by_ids(order_ids: List[str], user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return repository.fetch_orders_by_ids(order_ids, user_id=user.get("id"))

def get_user_batch_orders(batch_id: str, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Commandes de l'utilisateur rattachées à un batch (via batch_orders)."""
    order_ids = payments_repository.fetch_batch_order_ids(batch_id)
    if not order_ids:
        return []
    return repository.fetch_orders_by_ids(order_ids, user_id=user.get("id"))

def ensure_gateway_order_id(order: Dict[str, Any]) -> str:
    """
    Id passerelle de la commande; généré et persisté s'il est absent.
    - Échec de persistance: StorageError propagée (fatal pour le retry).
    """
    gateway_order_id = order.get("midtrans_order_id")
    if gateway_order_id:
        return gateway_order_id
    gateway_order_id = order_reference()
    repository.update_order(order["id"], {"midtrans_order_id": gateway_order_id})
    order["midtrans_order_id"] = gateway_order_id
    return gateway_order_id

def retry_payment(*, user: Dict[str, Any], order: Dict[str, Any]) -> Dict[str, Any]:
    """
    Relance du paiement passerelle.
    - snap_token en cache: réutilisé tel quel, aucun appel passerelle (évite les transactions en double)
    - sinon: id passerelle garanti, create-payment, token mis en cache (best-effort)
    Retour: {"order_id", "snap_token", "redirect_url", "reused"}
    """
    if not is_pending(order):
        raise HTTPException(status_code=409, detail="Commande déjà réglée")

    if order.get("snap_token"):
        logger.info("retry payment reusing cached snap_token order_id=%s", order.get("id"))
        return {"order_id": order.get("id"), "snap_token": order["snap_token"], "redirect_url": None, "reused": True}

    gateway_order_id = ensure_gateway_order_id(order)
    payment = payments_service.create_payment(
        order_id=gateway_order_id,
        amount=order.get("total_amount"),
        customer_details=customer_details_for_user(user, fallback_name=order.get("child_name")),
        item_details=order_item_details(order),
    )
    snap_token = payment.get("snap_token")
    try:
        repository.update_order(order["id"], {"snap_token": snap_token})
    except StorageError:
        logger.warning("retry payment snap_token caching failed order_id=%s", order.get("id"))

    return {
        "order_id": order.get("id"),
        "snap_token": snap_token,
        "redirect_url": payment.get("redirect_url"),
        "reused": False,
    }

def record_widget_callback(order_id: str, user: Dict[str, Any], event: str, result: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Callback du widget Snap (success/pending/error/close).
    - Journalise l'évènement et relit la commande depuis le store.
    - N'écrit rien: l'affichage "payé" côté client reste optimiste.
    """
    if event not in WIDGET_EVENTS:
        raise HTTPException(status_code=400, detail=f"Évènement inconnu: {event}")
    logger.info(
        "widget callback order_id=%s event=%s transaction_status=%s",
        order_id, event, (result or {}).get("transaction_status"),
    )
    order = get_user_order(order_id, user)
    return {"event": event, "order": order}

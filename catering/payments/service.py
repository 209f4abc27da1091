"""
Cas d'usage 'payments': fonction de transaction passerelle (create-payment).
Orchestre validation, mapping batch, normalisation des items et client Midtrans.
"""
from typing import Optional, Dict, Any, List
import logging
import math

from catering import config
from . import items as items_logic
from . import midtrans_client
from . import repository
from .errors import InvalidRequest, GatewayError

logger = logging.getLogger(__name__)

def validate_payment_request(order_id: Any, amount: Any) -> None:
    """
    Rejette la requête avant tout effet de bord.
    - orderId: chaîne non vide
    - amount: nombre fini, strictement positif une fois arrondi à l'unité
    """
    if not order_id or not str(order_id).strip():
        logger.error("Order ID is missing")
        raise InvalidRequest("Order ID is required")
    if (
        isinstance(amount, bool)
        or not isinstance(amount, (int, float))
        or (isinstance(amount, float) and not math.isfinite(amount))
        or items_logic.round_amount(amount) <= 0
    ):
        logger.error("Invalid amount: %s", amount)
        raise InvalidRequest("Valid amount is required")

def validate_payment_details(
    customer_details: Any,
    item_details: Any,
    batch_order_ids: Any,
) -> None:
    """
    Forme des champs optionnels (InvalidRequest, aucune écriture):
    - customerDetails: objet
    - itemDetails: liste d'objets
    - batchOrderIds: liste de chaînes non vides
    """
    if customer_details is not None and not isinstance(customer_details, dict):
        raise InvalidRequest("customerDetails must be an object")
    if item_details is not None and (
        not isinstance(item_details, list) or not all(isinstance(it, dict) for it in item_details)
    ):
        raise InvalidRequest("itemDetails must be a list of objects")
    if batch_order_ids is not None and (
        not isinstance(batch_order_ids, list)
        or not all(isinstance(oid, str) and oid.strip() for oid in batch_order_ids)
    ):
        raise InvalidRequest("batchOrderIds must be a list of order ids")

def build_customer_details(customer_details: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Fusionne les coordonnées fournies par-dessus les valeurs par défaut."""
    return {**config.DEFAULT_CUSTOMER_DETAILS, **(customer_details or {})}

def build_transaction_payload(
    order_id: str,
    amount: Any,
    customer_details: Optional[Dict[str, Any]] = None,
    item_details: Optional[List[Dict[str, Any]]] = None,
    batch_order_ids: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Construit le corps Snap; les item_details sont toujours réconciliés avec gross_amount."""
    gross_amount = items_logic.round_amount(amount)
    final_items = items_logic.reconcile_item_details(order_id, amount, item_details, batch_order_ids)
    return {
        "transaction_details": {"order_id": order_id, "gross_amount": gross_amount},
        "customer_details": build_customer_details(customer_details),
        "item_details": final_items,
        "credit_card": {"secure": True},
    }

def create_payment(
    *,
    order_id: Any,
    amount: Any,
    customer_details: Optional[Dict[str, Any]] = None,
    item_details: Optional[List[Dict[str, Any]]] = None,
    batch_order_ids: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Produit un pay-token Snap pour une commande (ou un batch de commandes).
    Étapes:
      1) Valider orderId/amount et la forme des champs optionnels (InvalidRequest)
      2) Exiger la clé serveur Midtrans (ConfigurationError)
      3) Normaliser/réconcilier les items (pur)
      4) Batch: persister le mapping batch_orders AVANT l'appel passerelle (StorageError si échec)
      5) Appeler Midtrans (GatewayError si non-2xx)
    Retour: {"snap_token": "...", "redirect_url": "..."}
    """
    validate_payment_request(order_id, amount)
    validate_payment_details(customer_details, item_details, batch_order_ids)
    order_id = str(order_id).strip()
    midtrans_client.require_server_key()

    logger.info(
        "create_payment order_id=%s amount=%s items=%s batch_orders=%s",
        order_id, amount, len(item_details or []), len(batch_order_ids or []),
    )
    # Payload construit avant toute écriture
    payload = build_transaction_payload(order_id, amount, customer_details, item_details, batch_order_ids)
    if batch_order_ids:
        repository.insert_batch_mappings(order_id, [oid.strip() for oid in batch_order_ids])

    data = midtrans_client.create_transaction(payload)
    if not data.get("token"):
        raise GatewayError(None, f"Snap token not received: {data}")
    return {"snap_token": data.get("token"), "redirect_url": data.get("redirect_url")}

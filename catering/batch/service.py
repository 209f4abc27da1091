"""
Cas d'usage 'batch': payer N commandes pending en une seule transaction passerelle.

Le marquage (snap_token, midtrans_order_id) des N commandes est séquentiel et
best-effort: un échec sur une commande est journalisé puis rapporté dans
`failed_order_ids`, sans interrompre les autres. Aucun verrou: deux batchs
concurrents sur des commandes qui se recouvrent produisent deux tokens valides,
la dernière écriture gagne.
"""
from typing import List, Dict, Any, Sequence
import logging

from catering.orders import repository as orders_repository
from catering.orders.helpers import is_pending, batch_item_details, customer_details_for_user
from catering.payments import service as payments_service
from catering.payments.errors import StorageError
from catering.utils.references import batch_reference

logger = logging.getLogger(__name__)

NOTHING_TO_PAY = "nothing_to_pay"
CREATED = "created"

def batch_amount(orders: Sequence[Dict[str, Any]]) -> float:
    return sum((o.get("total_amount") or 0) for o in orders)

def stamp_orders(order_ids: List[str], snap_token: str, batch_id: str) -> Dict[str, List[str]]:
    """Écrit le même couple (snap_token, midtrans_order_id) sur chaque commande, indépendamment."""
    updated: List[str] = []
    failed: List[str] = []
    for order_id in order_ids:
        try:
            orders_repository.update_order(order_id, {"snap_token": snap_token, "midtrans_order_id": batch_id})
            updated.append(order_id)
        except StorageError:
            logger.error("batch stamping failed order_id=%s batch_id=%s", order_id, batch_id)
            failed.append(order_id)
    return {"updated": updated, "failed": failed}

def process_batch_payment(*, user: Dict[str, Any], orders: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Étapes:
      1) Filtrer payment_status == pending (aucune: résultat informatif "nothing_to_pay")
      2) Montant = Σ total_amount; id batch synthétique "BATCH-..."
      3) Détail aplati de toutes les lignes, un seul appel create-payment avec batchOrderIds
      4) Marquer chaque commande avec le token et l'id batch (best-effort)
    """
    pending = [o for o in orders or [] if is_pending(o)]
    if not pending:
        logger.info("batch payment: nothing to pay user_id=%s candidates=%s", user.get("id"), len(orders or []))
        return {"status": NOTHING_TO_PAY, "message": "Aucune commande à payer", "order_ids": []}

    batch_id = batch_reference()
    order_ids = [str(o.get("id")) for o in pending]
    amount = batch_amount(pending)
    logger.info("batch payment batch_id=%s orders=%s amount=%s", batch_id, order_ids, amount)

    payment = payments_service.create_payment(
        order_id=batch_id,
        amount=amount,
        customer_details=customer_details_for_user(user),
        item_details=batch_item_details(pending),
        batch_order_ids=order_ids,
    )
    snap_token = payment.get("snap_token")
    stamped = stamp_orders(order_ids, snap_token, batch_id)

    return {
        "status": CREATED,
        "batch_order_id": batch_id,
        "snap_token": snap_token,
        "redirect_url": payment.get("redirect_url"),
        "amount": amount,
        "order_ids": order_ids,
        "updated_order_ids": stamped["updated"],
        "failed_order_ids": stamped["failed"],
    }

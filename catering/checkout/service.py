"""
Cas d'usage 'checkout': panier -> commande + lignes -> pay-token Snap.

Aucune transaction multi-requêtes n'est disponible côté orchestrateur: la seule
compensation effectuée est la suppression de la commande si l'insertion des
lignes échoue. Un échec passerelle laisse la commande en place (sans token),
récupérable via le chemin retry.
"""
from typing import Dict, Any
import logging

from catering.orders import repository
from catering.orders.helpers import customer_details_for_user, PENDING
from catering.payments import service as payments_service
from catering.payments.errors import PaymentError, StorageError
from catering.utils.references import order_reference
from . import cart as cart_logic

logger = logging.getLogger(__name__)

def checkout_cart(*, user: Dict[str, Any], cart: cart_logic.Cart) -> Dict[str, Any]:
    """
    Étapes:
      1) Valider panier/enfant (HTTPException 400, aucune écriture)
      2) Total exact = Σ price * quantity
      3) Insérer la commande (pending/pending) puis ses lignes; rollback de la commande si les lignes échouent
      4) Appeler create-payment et mettre le token en cache sur la commande (best-effort)
    Retour: {"order": {...}, "snap_token": "...", "redirect_url": "..."}
    """
    child = cart_logic.validate_cart(cart)
    total_amount = cart_logic.compute_total(cart)
    reference = order_reference()

    order = repository.insert_order({
        "user_id": user.get("id"),
        "order_number": reference,
        "midtrans_order_id": reference,
        "total_amount": total_amount,
        "status": PENDING,
        "payment_status": PENDING,
        "parent_notes": cart.notes or None,
        "child_name": child.name,
        "child_class": child.class_name,
    })
    order_id = order.get("id")
    logger.info("checkout order created order_id=%s reference=%s total=%s", order_id, reference, total_amount)

    try:
        repository.insert_line_items(cart_logic.to_line_item_rows(order_id, cart, child))
    except StorageError:
        deleted = repository.delete_order(order_id)
        logger.error("checkout line items failed, order rolled back order_id=%s deleted=%s", order_id, deleted)
        raise

    try:
        payment = payments_service.create_payment(
            order_id=reference,
            amount=total_amount,
            customer_details=customer_details_for_user(user),
            item_details=cart_logic.to_item_details(cart, child),
        )
    except PaymentError as e:
        # La commande reste "paiement non démarré"; le client peut relancer via retry-payment
        e.context["order_id"] = order_id
        logger.error("checkout payment creation failed order_id=%s type=%s", order_id, e.type)
        raise

    snap_token = payment.get("snap_token")
    if snap_token:
        try:
            repository.update_order(order_id, {"snap_token": snap_token})
            order["snap_token"] = snap_token
        except StorageError:
            logger.warning("checkout snap_token caching failed order_id=%s", order_id)

    return {"order": order, "snap_token": snap_token, "redirect_url": payment.get("redirect_url")}

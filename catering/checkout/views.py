# module catering.checkout.views
"""Endpoint du checkout panier.
- POST /api/v1/checkout: crée la commande + lignes puis un pay-token Snap (authentifié, rate-limité).
Sécurité:
- require_user: le parent doit être connecté.
- optional_rate_limit: limite la création de transactions passerelle.
"""
from typing import Dict, Any
import logging

from fastapi import APIRouter, Depends

from catering.utils.security import require_user
from catering.utils.rate_limit import optional_rate_limit
from catering.checkout import service as checkout_service
from catering.checkout.cart import Cart

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])

@router.post("", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def checkout(cart: Cart, user: Dict[str, Any] = Depends(require_user)):
    """
    Checkout du panier de l'utilisateur.
    - Entrée JSON: {"items": [{menu_item_id, name, price, quantity, child_name?, child_class?, child_id?,
      delivery_date?}], "child"?: {id, name, class_name}, "notes"?: str}
    - Succès: {"order": {...}, "snap_token": "...", "redirect_url": "..."}
    - Erreurs: 400 panier vide / enfant manquant; erreurs paiement via le handler PaymentError
      (order_id inclus si la commande a été conservée)
    """
    result = checkout_service.checkout_cart(user=user, cart=cart)
    logger.info("checkout ok user_id=%s order_id=%s", user.get("id"), (result.get("order") or {}).get("id"))
    return result

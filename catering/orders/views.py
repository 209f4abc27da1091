# module catering.orders.views
"""Endpoints des commandes côté parent.
- GET  /api/v1/orders: commandes de l'utilisateur (avec lignes).
- GET  /api/v1/orders/{order_id}: une commande (rafraîchissement après widget).
- GET  /api/v1/orders/batches/{batch_id}: commandes rattachées à un paiement groupé.
- POST /api/v1/orders/batch-payment: paiement groupé de plusieurs commandes pending.
- POST /api/v1/orders/{order_id}/retry-payment: relance (réutilise le token en cache).
- POST /api/v1/orders/{order_id}/widget-callback: trace un callback Snap, sans écrire.
"""
from typing import Dict, Any, List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from catering.utils.security import require_user
from catering.utils.rate_limit import optional_rate_limit
from catering.orders import service as orders_service
from catering.batch import service as batch_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])

class BatchPaymentRequest(BaseModel):
    order_ids: List[str] = Field(default_factory=list)

class WidgetCallbackRequest(BaseModel):
    event: str
    result: Optional[Dict[str, Any]] = None

@router.get("")
def list_orders(user: Dict[str, Any] = Depends(require_user)):
    return {"orders": orders_service.list_user_orders(user.get("id"))}

@router.post("/batch-payment", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def batch_payment(req: BatchPaymentRequest, user: Dict[str, Any] = Depends(require_user)):
    """
    Paiement groupé.
    - 400 si aucune commande sélectionnée
    - {"status": "nothing_to_pay"} si aucune n'est pending (pas une erreur)
    - Sinon {"status": "created", batch_order_id, snap_token, redirect_url, order_ids, ...}
    """
    if not req.order_ids:
        raise HTTPException(status_code=400, detail="Aucune commande sélectionnée")
    orders = orders_service.get_user_orders_by_ids(req.order_ids, user)
    return batch_service.process_batch_payment(user=user, orders=orders)

@router.get("/batches/{batch_id}")
def batch_orders(batch_id: str, user: Dict[str, Any] = Depends(require_user)):
    return {"batch_id": batch_id, "orders": orders_service.get_user_batch_orders(batch_id, user)}

@router.get("/{order_id}")
def get_order(order_id: str, user: Dict[str, Any] = Depends(require_user)):
    return orders_service.get_user_order(order_id, user)

@router.post("/{order_id}/retry-payment", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def retry_payment(order_id: str, user: Dict[str, Any] = Depends(require_user)):
    order = orders_service.get_user_order(order_id, user)
    return orders_service.retry_payment(user=user, order=order)

@router.post("/{order_id}/widget-callback")
def widget_callback(order_id: str, req: WidgetCallbackRequest, user: Dict[str, Any] = Depends(require_user)):
    return orders_service.record_widget_callback(order_id, user, req.event, req.result)

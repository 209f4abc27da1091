# module catering.cashier.views
"""Endpoints caisse.
- GET  /api/v1/cashier/orders?child_name=...: commandes pending à encaisser.
- POST /api/v1/cashier/orders/{order_id}/cash-payment: règlement espèces.
Sécurité: require_cashier (rôles cashier/admin).
"""
from typing import Dict, Any, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from catering.utils.security import require_cashier
from catering.cashier import service as cashier_service
from catering.orders import repository as orders_repository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cashier", tags=["Cashier API"])

class CashPaymentRequest(BaseModel):
    received_amount: int = Field(ge=0)
    notes: Optional[str] = None

@router.get("/orders")
def list_pending_orders(child_name: Optional[str] = None, cashier: Dict[str, Any] = Depends(require_cashier)):
    """Recherche des commandes pending (filtre optionnel sur le nom de l'enfant)."""
    return {"orders": cashier_service.search_pending_orders(child_name)}

@router.post("/orders/{order_id}/cash-payment")
def cash_payment(order_id: str, req: CashPaymentRequest, cashier: Dict[str, Any] = Depends(require_cashier)):
    """
    Encaisse une commande en espèces.
    - 400: montant reçu < total (aucune écriture)
    - 404: commande inconnue; 409: déjà réglée
    - Succès: {order, payment, cash_payment, change_amount, transaction_id}
    """
    order = orders_repository.fetch_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Commande introuvable")
    return cashier_service.settle_cash_payment(
        cashier=cashier,
        order=order,
        received_amount=req.received_amount,
        notes=req.notes,
    )

"""Couche service de la caisse (règlement en espèces).
Rôles:
- Rechercher les commandes pending d'un enfant.
- Valider le montant reçu (>= total) avant toute écriture.
- Enregistrer payments + cash_payments puis passer la commande à paid/confirmed.
Les écritures sont séquentielles et non atomiques: une panne entre deux écritures
laisse une trace de paiement sans mise à jour de la commande (réconciliation manuelle).
"""
from typing import Dict, Any, List, Optional
import logging
from decimal import Decimal, InvalidOperation, ROUND_CEILING, ROUND_FLOOR

from fastapi import HTTPException

from catering.cashier import repository
from catering.orders import repository as orders_repository
from catering.orders.helpers import is_pending, PAID, CONFIRMED
from catering.payments.items import round_amount
from catering.utils.references import cash_reference

logger = logging.getLogger(__name__)

CASH = "cash"

def search_pending_orders(child_name: Optional[str] = None) -> List[Dict[str, Any]]:
    return orders_repository.fetch_pending_orders(child_name=child_name)

def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal(0)
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return Decimal(0)
    return amount if amount.is_finite() else Decimal(0)

def amount_due(total_amount: Any) -> int:
    """Montant encaissé en IDR entiers: total arrondi à l'unité supérieure."""
    return int(_to_decimal(total_amount).to_integral_value(rounding=ROUND_CEILING))

def compute_change(total_amount: Any, received_amount: Any) -> int:
    """
    Monnaie rendue = reçu - total, arrondie à l'unité inférieure.
    Négative dès que le reçu est inférieur au total exact (non arrondi).
    """
    diff = _to_decimal(received_amount) - _to_decimal(total_amount)
    return int(diff.to_integral_value(rounding=ROUND_FLOOR))

def validate_cash_payment(order: Dict[str, Any], received_amount: Any) -> int:
    """
    Refuse localement (aucune écriture):
    - commande déjà réglée (409)
    - montant reçu inférieur au total (400)
    Retour: la monnaie à rendre.
    """
    if not is_pending(order):
        raise HTTPException(status_code=409, detail="Commande déjà réglée")
    change = compute_change(order.get("total_amount"), received_amount)
    if change < 0:
        raise HTTPException(status_code=400, detail="Montant reçu inférieur au total à payer")
    return change

def settle_cash_payment(
    *,
    cashier: Dict[str, Any],
    order: Dict[str, Any],
    received_amount: Any,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Règlement espèces d'une commande pending.
    Étapes:
      1) validate_cash_payment (aucune écriture si refus)
      2) payments: {cash, success, CASH-...}
      3) cash_payments: {reçu, rendu, caissier, notes}
      4) orders: payment_status=paid, status=confirmed, payment_method=cash
    """
    change = validate_cash_payment(order, received_amount)
    order_id = order.get("id")
    amount = amount_due(order.get("total_amount"))
    transaction_id = cash_reference()

    payment = repository.insert_payment({
        "order_id": order_id,
        "amount": amount,
        "payment_method": CASH,
        "status": "success",
        "transaction_id": transaction_id,
    })
    cash_payment = repository.insert_cash_payment({
        "order_id": order_id,
        "amount": amount,
        "received_amount": round_amount(received_amount),
        "change_amount": change,
        "cashier_id": cashier.get("id"),
        "notes": notes or None,
    })
    updated = orders_repository.update_order(order_id, {
        "payment_status": PAID,
        "status": CONFIRMED,
        "payment_method": CASH,
    })
    logger.info(
        "cash payment settled order_id=%s amount=%s change=%s cashier_id=%s",
        order_id, amount, change, cashier.get("id"),
    )
    return {
        "order": updated or {**order, "payment_status": PAID, "status": CONFIRMED, "payment_method": CASH},
        "payment": payment,
        "cash_payment": cash_payment,
        "change_amount": change,
        "transaction_id": transaction_id,
    }

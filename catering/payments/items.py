"""
Normalisation pure des item_details Midtrans (pas de HTTP, pas de DB).
"""
import logging
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import List, Dict, Any, Optional, Sequence

logger = logging.getLogger(__name__)

# module catering.payments.items
MAX_ITEM_NAME_LENGTH = 45
ELLIPSIS = "..."

def round_amount(value: Any) -> int:
    """
    Arrondit un montant à l'unité entière de la devise (IDR), demi vers le haut.
    - Accepte int/float/str/Decimal; None ou valeur non numérique -> 0.
    """
    if value is None or value == "":
        return 0
    try:
        return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return 0

def truncate_name(name: Optional[str], index: int) -> str:
    """
    Nom affiché par la passerelle.
    - > 45 caractères: tronqué à 45 + "..."
    - vide/absent: "Item {index+1}"
    """
    if name is None or name == "":
        return f"Item {index + 1}"
    name = str(name)
    if len(name) > MAX_ITEM_NAME_LENGTH:
        return name[:MAX_ITEM_NAME_LENGTH] + ELLIPSIS
    return name

def normalize_item_details(items: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Applique les contraintes Midtrans à chaque ligne:
    - id par défaut "item-{n}", nom tronqué/par défaut
    - prix arrondi à l'entier, quantité absente ou nulle -> 1
    """
    normalized: List[Dict[str, Any]] = []
    for index, item in enumerate(items or []):
        item = item or {}
        try:
            quantity = int(item.get("quantity") or 1)
        except (TypeError, ValueError, OverflowError):
            quantity = 1
        normalized.append({
            "id": str(item.get("id") or f"item-{index + 1}"),
            "price": round_amount(item.get("price") or 0),
            "quantity": quantity,
            "name": truncate_name(item.get("name"), index),
        })
    return normalized

def items_total(items: Sequence[Dict[str, Any]]) -> int:
    return sum(int(it["price"]) * int(it["quantity"]) for it in items)

def summary_item_name(batch_order_ids: Optional[Sequence[str]]) -> str:
    if batch_order_ids and len(batch_order_ids) > 1:
        return f"Batch Payment ({len(batch_order_ids)} orders)"
    return "Payment"

def summary_item(order_id: str, gross_amount: int, batch_order_ids: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    return {
        "id": order_id,
        "price": gross_amount,
        "quantity": 1,
        "name": summary_item_name(batch_order_ids),
    }

def reconcile_item_details(
    order_id: str,
    amount: Any,
    items: Optional[Sequence[Dict[str, Any]]],
    batch_order_ids: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Garantit Σ price*quantity == round(amount).
    - Détail fourni et cohérent: conservé (normalisé).
    - Détail absent ou incohérent (même d'une unité): remplacé par une ligne de synthèse unique.
    """
    gross_amount = round_amount(amount)
    if items:
        normalized = normalize_item_details(items)
        calculated = items_total(normalized)
        if calculated == gross_amount:
            return normalized
        logger.info(
            "Total mismatch order_id=%s items_total=%s gross_amount=%s, using summary item",
            order_id, calculated, gross_amount,
        )
    return [summary_item(order_id, gross_amount, batch_order_ids)]

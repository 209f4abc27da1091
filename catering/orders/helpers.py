"""
Helpers purs autour des commandes telles que renvoyées par le store (dicts).
"""
from typing import Any, Dict, List, Optional, Sequence

PENDING = "pending"
PAID = "paid"
CONFIRMED = "confirmed"

def is_pending(order: Dict[str, Any]) -> bool:
    return (order or {}).get("payment_status") == PENDING

def line_items_of(order: Dict[str, Any]) -> List[Dict[str, Any]]:
    return list((order or {}).get("order_line_items") or [])

def menu_item_name(item: Dict[str, Any], default: str = "Item") -> str:
    return ((item or {}).get("menu_items") or {}).get("name") or default

def customer_details_for_user(user: Optional[Dict[str, Any]], fallback_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Coordonnées client Midtrans à partir de l'utilisateur authentifié.
    - first_name: full_name, sinon fallback_name, sinon préfixe de l'email
    - Les clés absentes sont complétées par les valeurs par défaut côté service.
    """
    user = user or {}
    metadata = user.get("metadata") or {}
    email = user.get("email") or ""
    details: Dict[str, Any] = {}
    first_name = metadata.get("full_name") or fallback_name or (email.split("@")[0] if email else "")
    if first_name:
        details["first_name"] = first_name
    if email:
        details["email"] = email
    if metadata.get("phone"):
        details["phone"] = metadata["phone"]
    return details

def order_item_details(order: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Détail passerelle d'une commande unique (chemin retry)."""
    return [
        {
            "id": str(item.get("id")),
            "price": item.get("unit_price"),
            "quantity": item.get("quantity"),
            "name": menu_item_name(item, "Unknown Item"),
        }
        for item in line_items_of(order)
    ]

def batch_item_details(orders: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Aplatit les lignes de plusieurs commandes en un seul détail passerelle.
    - id "{order_id}-{item_id}" et nom "{item} - {enfant}" pour éviter les collisions entre commandes.
    """
    details: List[Dict[str, Any]] = []
    for order in orders:
        for item in line_items_of(order):
            child_name = item.get("child_name") or order.get("child_name") or ""
            name = menu_item_name(item)
            details.append({
                "id": f"{order.get('id')}-{item.get('id')}",
                "price": item.get("unit_price"),
                "quantity": item.get("quantity"),
                "name": f"{name} - {child_name}" if child_name else name,
            })
    return details

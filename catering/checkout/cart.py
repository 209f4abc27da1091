"""
Panier explicite (value object) et logique pure du checkout (pas de passerelle, pas de DB).
"""
from datetime import date
from typing import List, Dict, Any, Optional
from fastapi import HTTPException
from pydantic import BaseModel, Field

# module catering.checkout.cart
class Child(BaseModel):
    """Enfant identifié par son id, son nom, ou les deux."""
    id: Optional[str] = None
    name: Optional[str] = None
    class_name: Optional[str] = None

class CartLine(BaseModel):
    menu_item_id: str = Field(min_length=1)
    name: str = ""
    price: int = Field(ge=0)
    quantity: int = Field(gt=0)
    child_id: Optional[str] = None
    child_name: Optional[str] = None
    child_class: Optional[str] = None
    delivery_date: Optional[date] = None

class Cart(BaseModel):
    """
    Panier complet transmis par le client.
    - items: lignes {menu_item_id, name, price (IDR entier), quantity, enfant, date de livraison}
    - child: enfant sélectionné (sinon déduit de la première ligne qui en porte un)
    """
    items: List[CartLine] = Field(default_factory=list)
    child: Optional[Child] = None
    notes: Optional[str] = None

def resolve_child(cart: Cart) -> Child:
    """
    Enfant propriétaire de la commande.
    - Enfant sélectionné (id ou nom), sinon première ligne portant un child_id ou un child_name
    - Soulève HTTPException(400) si aucun enfant n'est sélectionné ni présent sur les lignes.
    """
    if cart.child and (cart.child.id or cart.child.name):
        return cart.child
    for line in cart.items:
        if line.child_id or line.child_name:
            return Child(id=line.child_id, name=line.child_name, class_name=line.child_class)
    raise HTTPException(status_code=400, detail="Aucun enfant sélectionné")

def validate_cart(cart: Cart) -> Child:
    """Rejette panier vide / enfant manquant / total nul avant toute écriture."""
    if not cart.items:
        raise HTTPException(status_code=400, detail="Panier vide")
    child = resolve_child(cart)
    if compute_total(cart) <= 0:
        raise HTTPException(status_code=400, detail="Montant du panier invalide")
    return child

def compute_total(cart: Cart) -> int:
    """Somme exacte price * quantity (prix entiers: aucun arrondi intermédiaire)."""
    return sum(line.price * line.quantity for line in cart.items)

def to_line_item_rows(order_id: str, cart: Cart, child: Child, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """
    Lignes order_line_items à insérer (sans total_price, calculé par le store).
    - Enfant de la ligne prioritaire, sinon enfant de la commande
    - delivery_date par défaut: aujourd'hui
    """
    today = today or date.today()
    return [
        {
            "order_id": order_id,
            "child_id": line.child_id or child.id,
            "child_name": line.child_name or child.name,
            "child_class": line.child_class or child.class_name,
            "menu_item_id": line.menu_item_id,
            "quantity": line.quantity,
            "unit_price": line.price,
            "delivery_date": (line.delivery_date or today).isoformat(),
            "order_date": today.isoformat(),
            "notes": None,
        }
        for line in cart.items
    ]

def to_item_details(cart: Cart, child: Child) -> List[Dict[str, Any]]:
    """Détail passerelle: une ligne par ligne de panier, nom suffixé par l'enfant."""
    return [
        {
            "id": line.menu_item_id,
            "price": line.price,
            "quantity": line.quantity,
            "name": _with_child(line.name or "Item", line.child_name or child.name),
        }
        for line in cart.items
    ]

def _with_child(name: str, child_name: Optional[str]) -> str:
    return f"{name} - {child_name}" if child_name else name

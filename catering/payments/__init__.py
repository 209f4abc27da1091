"""
Module 'payments' (feature-first): point d'entrée public.
Réunit normalisation des items, client Midtrans, repository batch_orders et service create-payment.
"""

from .errors import (
    PaymentError,
    InvalidRequest,
    ConfigurationError,
    StorageError,
    GatewayError,
    UnexpectedError,
)
from .items import round_amount, truncate_name, normalize_item_details, reconcile_item_details
from .midtrans_client import require_server_key, create_transaction
from .repository import insert_batch_mappings, fetch_batch_order_ids
from .service import create_payment, build_transaction_payload

__all__ = [
    # errors
    "PaymentError",
    "InvalidRequest",
    "ConfigurationError",
    "StorageError",
    "GatewayError",
    "UnexpectedError",
    # items
    "round_amount",
    "truncate_name",
    "normalize_item_details",
    "reconcile_item_details",
    # midtrans
    "require_server_key",
    "create_transaction",
    # repository
    "insert_batch_mappings",
    "fetch_batch_order_ids",
    # services
    "create_payment",
    "build_transaction_payload",
]

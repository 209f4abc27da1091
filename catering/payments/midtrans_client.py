"""
Adaptateur Midtrans Snap: centralise l'appel "create transaction" et la configuration.
"""
import logging
from typing import Any, Dict

import requests

from catering import config
from .errors import ConfigurationError, GatewayError

logger = logging.getLogger(__name__)

# module catering.payments.midtrans_client
def require_server_key() -> str:
    """
    Retourne la clé serveur Midtrans.
    - Échoue fermé (ConfigurationError) si MIDTRANS_SERVER_KEY est absente.
    """
    if not config.MIDTRANS_SERVER_KEY:
        logger.error("Midtrans server key not configured")
        raise ConfigurationError("Midtrans server key not configured")
    return config.MIDTRANS_SERVER_KEY

def create_transaction(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Crée une transaction Snap.
    - payload: {transaction_details, customer_details, item_details, credit_card}
    - Auth: Basic base64("<server_key>:") via requests (mot de passe vide)
    - Réponse non-2xx: GatewayError(statut, corps brut)
    Retour: dict {"token": "...", "redirect_url": "https://..."}
    """
    server_key = require_server_key()
    order_id = (payload.get("transaction_details") or {}).get("order_id")
    try:
        resp = requests.post(
            config.MIDTRANS_SNAP_URL,
            json=payload,
            auth=(server_key, ""),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=config.MIDTRANS_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error("midtrans.create_transaction unreachable order_id=%s error=%s", order_id, e)
        raise GatewayError(None, str(e))

    logger.info("midtrans.create_transaction order_id=%s status=%s", order_id, resp.status_code)
    if not resp.ok:
        logger.error("midtrans.create_transaction rejected order_id=%s body=%s", order_id, resp.text)
        raise GatewayError(resp.status_code, resp.text)
    return resp.json()

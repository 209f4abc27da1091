import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from catering.payments import service as payments_service
from catering.payments.errors import InvalidRequest, wrap_unexpected
from catering.utils.security import require_user
from catering.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# module catering.payments.views
@router.options("/create-payment", include_in_schema=False)
async def create_payment_preflight():
    """Préflight CORS: 200 vide avec en-têtes permissifs."""
    return Response(status_code=200, headers=CORS_HEADERS)

@router.post("/create-payment", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_payment(request: Request, user: Dict[str, Any] = Depends(require_user)):
    """
    Fonction de transaction passerelle: retourne un pay-token Snap.
    - Entrée JSON: { "orderId": str, "amount": number, "customerDetails"?: {...},
                     "itemDetails"?: [{id, name, price, quantity}], "batchOrderIds"?: [str] }
    - Succès: 200 {snap_token, redirect_url}
    - Échec: 500 {error, details, type} (InvalidRequest, ConfigurationError, StorageError,
      GatewayError avec statut+corps Midtrans, UnexpectedError)
    - Toutes les réponses du handler portent les en-têtes CORS; 401 (non authentifié) et 429
      (rate limit) sont levés avant, les en-têtes CORS y sont posés par CORSMiddleware.
    """
    logger.info("create_payment requested user_id=%s", user.get("id"))
    try:
        try:
            body: Dict[str, Any] = await request.json()
        except Exception:
            raise InvalidRequest("Invalid JSON in request body")
        if not isinstance(body, dict):
            raise InvalidRequest("Invalid JSON in request body")

        result = payments_service.create_payment(
            order_id=body.get("orderId"),
            amount=body.get("amount"),
            customer_details=body.get("customerDetails"),
            item_details=body.get("itemDetails"),
            batch_order_ids=body.get("batchOrderIds"),
        )
        return JSONResponse(result, headers=CORS_HEADERS)
    except Exception as e:
        err = wrap_unexpected(e)
        logger.exception("Erreur create_payment type=%s", err.type)
        return JSONResponse(status_code=500, content=err.to_dict(), headers=CORS_HEADERS)

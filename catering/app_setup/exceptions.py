"""
Gestionnaires d'exceptions.
- PaymentError (hors create-payment, qui formate lui-même sa réponse): JSON {detail, type, details}
  avec le statut propre à la classe (400 InvalidRequest, 502 GatewayError, 500 sinon).
- Le contexte métier (ex: order_id conservé après un échec passerelle) est ajouté au corps.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from catering.payments.errors import PaymentError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PaymentError)
    async def payment_error_handler(request: Request, exc: PaymentError):
        logger.error("PaymentError path=%s type=%s error=%s", request.url.path, exc.type, exc.message)
        content = {"detail": exc.message, "type": exc.type, "details": exc.details}
        content.update(exc.context)
        return JSONResponse(status_code=exc.status_code, content=content)

"""
Taxonomie d'erreurs du flux de paiement.

Chaque erreur expose `type` (nom de la classe) et `details` (texte brut du
fournisseur si disponible), repris tels quels dans le corps JSON des réponses
d'erreur afin qu'un opérateur puisse diagnostiquer un rejet côté passerelle
sans accès aux logs serveur.
"""
from typing import Any, Dict, Optional


class PaymentError(Exception):
    """Racine des erreurs du flux checkout/paiement."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else f"{type(self).__name__}: {message}"
        # Contexte métier ajouté par les orchestrateurs (ex: order_id conservé après échec passerelle)
        self.context: Dict[str, Any] = {}

    @property
    def type(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details, "type": self.type}


class InvalidRequest(PaymentError):
    """orderId/amount manquant ou invalide (rejeté avant tout effet de bord)."""

    status_code = 400


class ConfigurationError(PaymentError):
    """Clé serveur de la passerelle absente: on échoue fermé."""


class StorageError(PaymentError):
    """Écriture critique refusée par le store (mapping batch, commande, lignes)."""


class GatewayError(PaymentError):
    """Réponse non-2xx (ou injoignable) de la passerelle; conserve statut et corps."""

    status_code = 502

    def __init__(self, status: Optional[int], body: str):
        label = status if status is not None else "n/a"
        super().__init__(f"Midtrans API error: {label} - {body}", details=body)
        self.status = status
        self.body = body


class UnexpectedError(PaymentError):
    """Toute autre exception, enveloppée avec son message et son type d'origine."""

    def __init__(self, original: BaseException):
        super().__init__(
            str(original) or "An unexpected error occurred",
            details=f"{type(original).__name__}: {original}",
        )
        self.original_type = type(original).__name__


def wrap_unexpected(exc: BaseException) -> PaymentError:
    """Retourne exc inchangée si elle appartient déjà à la taxonomie, sinon l'enveloppe."""
    if isinstance(exc, PaymentError):
        return exc
    return UnexpectedError(exc)

import secrets
import string
import time

_BASE36 = string.digits + string.ascii_lowercase

def random_suffix(length: int = 9) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))

def generate_reference(prefix: str) -> str:
    """
    Identifiant lisible "{PREFIX}-{epoch_ms}-{9 caractères base36}".
    Unicité indicative seulement: la clé primaire du store fait foi.
    """
    return f"{prefix}-{int(time.time() * 1000)}-{random_suffix()}"

def order_reference() -> str:
    return generate_reference("ORDER")

def batch_reference() -> str:
    return generate_reference("BATCH")

def cash_reference() -> str:
    return generate_reference("CASH")

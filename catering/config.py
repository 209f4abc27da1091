# catering.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du service catering.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Midtrans), sécurité cookies, CORS/hosts
- Fournit les coordonnées client par défaut envoyées à la passerelle
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _env_flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes")

# Supabase: URL et clés (anon/service)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
# - SUPABASE_SERVICE_ROLE_KEY est accepté comme alias (nom utilisé par les edge functions)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("VITE_SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_SERVICE_ROLE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Midtrans Snap: clé serveur (obligatoire pour créer une transaction) et endpoint
MIDTRANS_SERVER_KEY = _clean_env(os.getenv("MIDTRANS_SERVER_KEY") or "")
MIDTRANS_IS_PRODUCTION = _env_flag("MIDTRANS_IS_PRODUCTION")
MIDTRANS_SNAP_URL = _clean_env(os.getenv("MIDTRANS_SNAP_URL") or "") or (
    "https://app.midtrans.com/snap/v1/transactions"
    if MIDTRANS_IS_PRODUCTION
    else "https://app.sandbox.midtrans.com/snap/v1/transactions"
)
MIDTRANS_TIMEOUT = float(os.getenv("MIDTRANS_TIMEOUT", "15"))

# Coordonnées client par défaut (fusionnées sous customerDetails)
DEFAULT_CUSTOMER_DETAILS = {
    "first_name": _clean_env(os.getenv("DEFAULT_CUSTOMER_NAME") or "Customer"),
    "email": _clean_env(os.getenv("DEFAULT_CUSTOMER_EMAIL") or "customer@example.com"),
    "phone": _clean_env(os.getenv("DEFAULT_CUSTOMER_PHONE") or "08123456789"),
}

# Cookies / sécurité
COOKIE_SECURE = _env_flag("COOKIE_SECURE")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]


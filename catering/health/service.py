from urllib.parse import urlparse
import socket
from catering import config
from catering.infra.supabase_client import get_service_supabase, service_supabase_configured

TABLES = ["orders", "order_line_items", "batch_orders", "payments", "cash_payments"]

def _check_table(client, name: str):
    try:
        res = client.table(name).select("*").limit(1).execute()
        cnt = len(res.data or [])
        return {"ok": True, "rows": cnt}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_supabase_info():
    effective_url = config.SUPABASE_URL
    parsed = urlparse(effective_url) if effective_url else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except Exception as e:
            dns_ok = False
            dns_error = str(e)

    info = {
        "supabase_url": effective_url,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "service_configured": service_supabase_configured(),
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    try:
        client = get_service_supabase()
        for t in TABLES:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info

def health_midtrans_info():
    """État de configuration Midtrans (jamais la clé elle-même)."""
    return {
        "server_key_configured": bool(config.MIDTRANS_SERVER_KEY),
        "is_production": config.MIDTRANS_IS_PRODUCTION,
        "snap_url": config.MIDTRANS_SNAP_URL,
    }

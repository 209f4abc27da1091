from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from catering.health import service as health_service
from catering.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/supabase")
def health_supabase():
    return JSONResponse(health_service.health_supabase_info())

@router.get("/midtrans")
def health_midtrans():
    return health_service.health_midtrans_info()

@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return rate_limit_health_info(request)

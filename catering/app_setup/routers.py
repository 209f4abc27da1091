"""
Registre central des routers (API v1, health).
- API v1: payments (create-payment), checkout, orders (batch, retry, callbacks), cashier
- Health: health_router
"""
from fastapi import FastAPI
from catering.payments import views as payments_views
from catering.checkout import views as checkout_views
from catering.orders import views as orders_views
from catering.cashier import views as cashier_views
from catering.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    - L'ordre n'a pas d'impact sauf conflits de chemins (évités par préfixes).
    """
    app.include_router(payments_views.router)
    app.include_router(checkout_views.router)
    app.include_router(orders_views.router)
    app.include_router(cashier_views.router)
    app.include_router(health_router)

"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: gunicorn/uvicorn-workers) importe `catering.asgi:app`.
- Toute la configuration FastAPI (routes, middlewares, handlers) est centralisée dans
  catering.app_setup.factory, ce fichier ne fait qu'exposer l'instance `app`.
"""

from catering.app_setup.factory import create_app

app = create_app()

if __name__ == "__main__":
    # Exécution directe utile en développement local (uvicorn standalone).
    import os
    import uvicorn
    uvicorn.run(
        "catering.asgi:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )

# app/routers/__init__.py

from .auth.auth_router import router as auth_router

from .ledger.form_data_router import router as form_data_router


__all__ = [
"auth_router",

"form_data_router",
]

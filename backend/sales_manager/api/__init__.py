"""
API Routes
Progetto: Sales Manager (Gestione Vendite)

Modulo per l'aggregazione dei router versionati.
"""

from sales_manager.api.v1 import api_v1_router

# Esportazione router
__all__ = ["api_v1_router"]

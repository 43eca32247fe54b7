"""
Sales Manager (Gestione Vendite) - backend Zeralda ERP.
"""

__version__ = "1.0.0"

"""
Ambiente Jinja2 condiviso
Progetto: Sales Manager (Gestione Vendite)

Usato per i documenti PDF e per i testi dei promemoria.
"""

import os

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sales_manager.core.money import format_currency

# Path alla cartella templates del package
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")


def build_environment(currency: str, templates_dir: str = TEMPLATES_DIR) -> Environment:
    """
    Crea l'ambiente Jinja2 con il filtro `currency`.

    L'autoescape è attivo solo per i template HTML.
    """
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=False,
    )
    env.filters["currency"] = lambda amount: format_currency(amount, currency)
    return env

"""
Service Layer per l'anagrafica clienti
Progetto: Sales Manager (Gestione Vendite)

CRUD clienti e riconciliazione dei totali progressivi.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List

from sales_manager.core.money import ZERO, to_money
from sales_manager.core.results import operation
from sales_manager.models import Customer
from sales_manager.schemas.customer import CustomerCreate, CustomerUpdate
from sales_manager.services.repository import SalesRepository

# Logger per questo modulo
logger = logging.getLogger(__name__)


class CustomerService:
    """
    Service per la gestione dei clienti.

    I totali progressivi (total_purchases, invoice_count) vengono mantenuti
    dall'InvoiceService in modo eventualmente consistente;
    `reconcile_totals` li ricalcola dalle fatture.
    """

    def __init__(self, repository: SalesRepository) -> None:
        self.repository = repository

    @operation("add_customer")
    async def add_customer(self, data: CustomerCreate) -> Customer:
        """
        Crea un nuovo cliente.

        Args:
            data: Dati anagrafici

        Returns:
            Customer: Il cliente creato
        """
        customer = Customer(**data.model_dump())
        self.repository.customers.append(customer)
        await self.repository.save("customers")
        logger.info("Cliente %s creato", customer.name)
        return customer

    @operation("update_customer")
    async def update_customer(self, customer_id: str, data: CustomerUpdate) -> Customer:
        """
        Aggiorna i dati anagrafici di un cliente.

        Le fatture già emesse mantengono il loro snapshot.

        Raises:
            NotFoundError: Cliente non trovato
        """
        customer = self.repository.get_customer(customer_id)
        for field, value in data.model_dump(exclude_none=True).items():
            setattr(customer, field, value)
        await self.repository.save("customers")
        return customer

    @operation("delete_customer")
    async def delete_customer(self, customer_id: str) -> Customer:
        """
        Elimina un cliente dall'anagrafica.

        Raises:
            NotFoundError: Cliente non trovato
        """
        customer = self.repository.get_customer(customer_id)
        self.repository.customers.remove(customer)
        await self.repository.save("customers")
        logger.info("Cliente %s eliminato", customer.name)
        return customer

    @operation("get_customer")
    async def get_customer(self, customer_id: str) -> Customer:
        return self.repository.get_customer(customer_id)

    def list_customers(self) -> List[Customer]:
        return sorted(self.repository.customers, key=lambda c: c.name.lower())

    @operation("reconcile_totals")
    async def reconcile_totals(self) -> List[Customer]:
        """
        Ricalcola total_purchases e invoice_count dalle fatture.

        Returns:
            I clienti i cui totali sono stati corretti
        """
        totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        counts: Dict[str, int] = defaultdict(int)
        for invoice in self.repository.invoices:
            customer_id = invoice.customer.id
            if customer_id is None:
                continue
            totals[customer_id] += invoice.total
            counts[customer_id] += 1

        corrected = []
        for customer in self.repository.customers:
            expected_total = to_money(totals[customer.id])
            expected_count = counts[customer.id]
            if customer.total_purchases != expected_total or customer.invoice_count != expected_count:
                logger.warning(
                    "Totali cliente %s riallineati: %s/%d -> %s/%d",
                    customer.id,
                    customer.total_purchases,
                    customer.invoice_count,
                    expected_total,
                    expected_count,
                )
                customer.total_purchases = expected_total
                customer.invoice_count = expected_count
                corrected.append(customer)

        if corrected:
            await self.repository.save("customers")
        return corrected

"""
Router FastAPI per l'anagrafica clienti
Progetto: Sales Manager (Gestione Vendite)
"""

from fastapi import APIRouter, Depends, status

from sales_manager.core.deps import get_customer_service
from sales_manager.models import Customer
from sales_manager.schemas.customer import CustomerCreate, CustomerUpdate
from sales_manager.services.customer_service import CustomerService

router = APIRouter(
    prefix="/customers",
    tags=["Clienti"],
)


@router.get(
    "/",
    name="clienti_lista",
    summary="Lista clienti",
    response_model=list[Customer],
)
async def list_customers(
    service: CustomerService = Depends(get_customer_service),
) -> list[Customer]:
    return service.list_customers()


@router.post(
    "/reconcile",
    name="clienti_riconcilia",
    summary="Riallinea i totali cliente",
    description="Ricalcola totale acquisti e numero fatture di ogni cliente dalle fatture.",
    response_model=list[Customer],
)
async def reconcile_customers(
    service: CustomerService = Depends(get_customer_service),
) -> list[Customer]:
    result = await service.reconcile_totals()
    return result.unwrap()


@router.get(
    "/{customer_id}",
    name="cliente_dettaglio",
    summary="Dettaglio cliente",
    response_model=Customer,
)
async def get_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
) -> Customer:
    result = await service.get_customer(customer_id)
    return result.unwrap()


@router.post(
    "/",
    name="cliente_crea",
    summary="Crea cliente",
    response_model=Customer,
    status_code=status.HTTP_201_CREATED,
)
async def create_customer(
    data: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
) -> Customer:
    result = await service.add_customer(data)
    return result.unwrap()


@router.patch(
    "/{customer_id}",
    name="cliente_aggiorna",
    summary="Aggiorna cliente",
    response_model=Customer,
)
async def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service),
) -> Customer:
    result = await service.update_customer(customer_id, data)
    return result.unwrap()


@router.delete(
    "/{customer_id}",
    name="cliente_elimina",
    summary="Elimina cliente",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
) -> None:
    result = await service.delete_customer(customer_id)
    result.unwrap()

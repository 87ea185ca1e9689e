"""Customer API endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import PaginationParams, get_customer_generator, get_db
from app.schemas.customer import (
    BulkCreateError,
    BulkCreateRequest,
    BulkCreateResponse,
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
    ErrorResponse,
    PaginatedResponse,
)
from app.services import bulk_create as bulk_service
from app.services import customer as customer_service
from app.services.errors import (
    CustomerConflictError,
    CustomerNotFoundError,
    InvalidArgumentError,
)
from app.services.random_customer import RandomCustomerGenerator

router = APIRouter(prefix="/customers", tags=["customers"])

_NOT_FOUND = {"model": ErrorResponse, "description": "Customer not found"}
_BAD_REQUEST = {"model": ErrorResponse, "description": "Invalid request"}
_CONFLICT = {"model": ErrorResponse, "description": "Email already in use"}


@router.get(
    "",
    response_model=PaginatedResponse[CustomerResponse],
    responses={400: _BAD_REQUEST},
    summary="Search customers",
)
async def search_customers(
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    search: Annotated[str | None, Query(description="Matches name or email")] = None,
    email: Annotated[str | None, Query(description="Exact email")] = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    sort_order: Annotated[str | None, Query(alias="sortOrder")] = None,
    date_from: Annotated[datetime | None, Query(alias="dateFrom")] = None,
    date_to: Annotated[datetime | None, Query(alias="dateTo")] = None,
) -> PaginatedResponse[CustomerResponse]:
    """Search active customers with filters, sorting and pagination."""
    try:
        customers, total_count = await customer_service.search_customers(
            db,
            skip=pagination.skip,
            take=pagination.page_size,
            search_term=search,
            email=email,
            date_from=date_from,
            date_to=date_to,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return PaginatedResponse[CustomerResponse].build(
        items=[CustomerResponse.model_validate(c) for c in customers],
        total_count=total_count,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: _BAD_REQUEST, 409: _CONFLICT},
    summary="Create a customer",
)
async def create_customer(
    customer_data: CustomerCreate,
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CustomerResponse:
    """Create a new customer."""
    try:
        customer = await customer_service.create_customer(db, customer_data)
    except CustomerConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    await db.commit()

    response.headers["Location"] = str(
        request.url_for("get_customer", customer_id=str(customer.id))
    )
    return CustomerResponse.model_validate(customer)


@router.post(
    "/bulk",
    response_model=BulkCreateResponse,
    responses={400: _BAD_REQUEST},
    summary="Generate random customers",
)
async def bulk_create_customers(
    bulk_request: BulkCreateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    generator: Annotated[RandomCustomerGenerator, Depends(get_customer_generator)],
) -> BulkCreateResponse:
    """Create ``count`` random customers; failures are reported per record."""
    try:
        result = await bulk_service.bulk_create_customers(db, bulk_request.count, generator)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return BulkCreateResponse(
        success_count=result.success_count,
        failure_count=result.failure_count,
        created_customers=[CustomerResponse.model_validate(c) for c in result.created_customers],
        errors=[BulkCreateError(index=e.index, message=e.message) for e in result.errors],
    )


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={404: _NOT_FOUND},
    summary="Get customer by ID",
)
async def get_customer(
    customer_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CustomerResponse:
    """Get customer details."""
    customer = await customer_service.get_customer(db, customer_id)
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer {customer_id} not found",
        )
    return CustomerResponse.model_validate(customer)


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={400: _BAD_REQUEST, 404: _NOT_FOUND, 409: _CONFLICT},
    summary="Update customer",
)
async def update_customer(
    customer_id: UUID,
    customer_data: CustomerUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CustomerResponse:
    """Replace a customer's name, email, phone and address."""
    try:
        customer = await customer_service.update_customer(db, customer_id, customer_data)
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except CustomerConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    await db.commit()
    return CustomerResponse.model_validate(customer)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: _NOT_FOUND},
    summary="Delete customer",
)
async def delete_customer(
    customer_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """Soft-delete a customer; the row is kept but hidden from every read."""
    try:
        await customer_service.soft_delete_customer(db, customer_id)
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# app/routers/products.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from app.services.product_service import ProductService

router = APIRouter(tags=["Menu"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """
    List menu categories in display order.
    """
    return service.list_categories(session)


@router.get("/products", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    category_id: uuid.UUID | None = None,
    search: str | None = None,
    only_available: bool = True,
):
    """
    List menu items.

    - `category_id` restricts to one category.
    - `search` matches name or description, case-insensitively.
    - `only_available=True` hides unavailable items by default.
    """
    return service.list_products(
        session,
        category_id=category_id,
        search=search,
        only_available=only_available,
    )


@router.get("/products/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single menu item by id.
    """
    return service.get_product(session, product_id)


# -------- Admin endpoints --------


@router.post(
    "/categories",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    """
    Create a category (admin only).
    """
    return service.create_category(session, payload)


@router.patch(
    "/categories/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
):
    """
    Update a category (admin only).
    """
    return service.update_category(session, category_id, payload)


@router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete an empty category (admin only).
    """
    service.delete_category(session, category_id)
    return None


@router.post(
    "/products",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new menu item (admin only).
    """
    return service.create_product(session, payload)


@router.patch(
    "/products/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing menu item (admin only).
    """
    return service.update_product(session, product_id, payload)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a menu item (admin only).
    """
    service.delete_product(session, product_id)
    return None

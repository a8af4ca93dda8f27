# app/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import get_client_session
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from app.services.product_service import ProductService
from app.services.sessions import ClientSession

router = APIRouter(prefix="/cart", tags=["Cart"])

product_service = ProductService(ProductRepository())


@router.get("", response_model=CartSummary)
def get_my_cart(client: ClientSession = Depends(get_client_session)):
    """
    Get the current session's cart summary.

    Auth:
      - None. Guests can build a cart; signing in is only needed to check out.
    """
    return client.cart.summary()


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    client: ClientSession = Depends(get_client_session),
):
    """
    Add a product to the cart (merges with an existing line).

    - 404 if the product does not exist, 400 if it is unavailable.
    """
    item = product_service.line_item_for(session, payload.product_id)
    client.cart.add_item(item, payload.quantity)
    return client.cart.summary()


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    client: ClientSession = Depends(get_client_session),
):
    """
    Set the quantity of a product in the cart.

    A quantity of 0 or less removes the line. Unknown products are ignored.
    """
    client.cart.update_quantity(product_id, payload.quantity)
    return client.cart.summary()


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: uuid.UUID,
    client: ClientSession = Depends(get_client_session),
):
    """
    Remove a product from the cart.
    """
    client.cart.remove_item(product_id)
    return client.cart.summary()


@router.delete("", response_model=CartSummary)
def clear_cart(client: ClientSession = Depends(get_client_session)):
    """
    Clear the entire cart.
    """
    client.cart.clear()
    return client.cart.summary()

# app/services/product_service.py
import uuid

from sqlmodel import Session

from app.core.errors import InvalidInput, NotFound
from app.models.product import Category, Product
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import LineItem
from app.schemas.product import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
)


class ProductService:
    """
    Business logic for the menu (categories & products).

    Responsibilities:
      - read path for the storefront (list, filter, search)
      - admin-only CRUD (enforced at router via require_admin)
      - turning a product into a cart line item
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Categories -----

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.list_categories(session)

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.repo.get_category(session, category_id)
        if not category:
            raise NotFound("Category not found")
        return category

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        return self.repo.save_category(session, Category(**payload.model_dump()))

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> Category:
        category = self.get_category(session, category_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if field == "name" and value is None:
                continue
            setattr(category, field, value)
        return self.repo.save_category(session, category)

    def delete_category(self, session: Session, category_id: uuid.UUID) -> None:
        """
        Delete an empty category. Categories that still hold products
        are rejected so no product is left pointing nowhere.
        """
        category = self.get_category(session, category_id)
        if self.repo.count_in_category(session, category_id):
            raise InvalidInput("Category still contains products")
        self.repo.delete_category(session, category)

    # ----- Products -----

    def list_products(
        self,
        session: Session,
        category_id: uuid.UUID | None = None,
        search: str | None = None,
        only_available: bool = True,
    ) -> list[Product]:
        search = (search or "").strip() or None
        return self.repo.list_products(
            session,
            category_id=category_id,
            search=search,
            only_available=only_available,
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        if payload.category_id is not None:
            self.get_category(session, payload.category_id)
        return self.repo.save(session, Product(**payload.model_dump()))

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product. Only fields present in the payload
        are touched.
        """
        product = self.get_product(session, product_id)
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("category_id") is not None:
            self.get_category(session, changes["category_id"])

        for field, value in changes.items():
            if field in ("name", "price", "is_available", "display_order") and value is None:
                continue
            setattr(product, field, value)

        return self.repo.save(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        product = self.get_product(session, product_id)
        self.repo.delete(session, product)

    # ----- Cart -----

    def line_item_for(self, session: Session, product_id: uuid.UUID) -> LineItem:
        """
        Build a cart line for an orderable product (price as of now).

        Raises:
            NotFound: unknown product.
            InvalidInput: product is currently unavailable.
        """
        product = self.get_product(session, product_id)
        if not product.is_available:
            raise InvalidInput("Product is currently unavailable")
        return LineItem(
            product_id=product.id,
            name=product.name,
            unit_price=product.price,
            quantity=1,
            image_url=product.image_url,
        )

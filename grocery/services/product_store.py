"""Query and mutation operations over the product catalog JSON store."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from grocerylib.storage import ListStore

from .schemas import (
    REQUIRED_FIELDS,
    ProductFilters,
    ProductModel,
    missing_fields,
    parse_float,
    parse_int,
)


class ProductError(Exception):
    """Client-facing failure of a catalog operation."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(ProductError):
    pass


class NotFound(ProductError):
    status_code = 404

    def __init__(self, message: str = "Product not found") -> None:
        super().__init__(message)


class EmptyFilterValue(ProductError):
    pass


class NoResultsAboveMin(ProductError):
    pass


REQUIRED_MESSAGE = "All fields are required: " + ", ".join(REQUIRED_FIELDS)


def _same_text(left: Any, right: str) -> bool:
    return str(left).lower() == right.lower()


def _paginate(items: list[dict], page: str, limit: str) -> list[dict]:
    page_num = parse_int(page)
    limit_num = parse_int(limit)
    if page_num is None or limit_num is None:
        return []
    start = (page_num - 1) * limit_num
    return items[start:start + limit_num]


class ProductCatalog:
    """High-level operations for the product JSON store.

    Every call loads the full collection from ``store``; mutations compute
    the next collection and hand it back to the store in one locked
    read-modify-write cycle.
    """

    def __init__(self, store: ListStore, *, strict_filters: bool = True) -> None:
        self._store = store
        self.strict_filters = strict_filters

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def all(self) -> list[dict]:
        return self._store.load()

    def list(self, filters: ProductFilters | None = None) -> list[dict]:
        filters = filters or ProductFilters()
        products = self.all()

        if filters.category is not None:
            products = [p for p in products if _same_text(p.get("category", ""), filters.category)]
            if not filters.category:
                raise EmptyFilterValue(f"Category {filters.category} not available")

        if filters.brand is not None:
            products = [p for p in products if _same_text(p.get("brand", ""), filters.brand)]
            if not filters.brand:
                raise EmptyFilterValue(f"Brand {filters.brand} not available")

        if filters.inStock is not None:
            wanted = filters.inStock.lower() == "true"
            products = [p for p in products if p.get("inStock") is wanted]

        if filters.priceMin is not None:
            minimum = parse_float(filters.priceMin)
            products = [p for p in products if parse_float(p.get("price")) >= minimum]
            if not products and self.strict_filters:
                raise NoResultsAboveMin(f"Price {filters.priceMin} is high")

        if filters.priceMax is not None:
            maximum = parse_float(filters.priceMax)
            products = [p for p in products if parse_float(p.get("price")) <= maximum]
            if not filters.priceMax and self.strict_filters:
                raise EmptyFilterValue(f"Price {filters.priceMax} is Min")

        if filters.page is not None and filters.limit is not None:
            products = _paginate(products, filters.page, filters.limit)

        return products

    def get(self, product_id: Any) -> dict:
        target = parse_int(product_id)
        for item in self.all():
            if target is not None and item.get("id") == target:
                return item
        raise NotFound()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    @staticmethod
    def _validate(payload: Mapping[str, Any] | None) -> ProductModel:
        payload = payload if isinstance(payload, Mapping) else {}
        if missing_fields(payload):
            raise ValidationFailed(REQUIRED_MESSAGE)
        try:
            return ProductModel(**payload)
        except ValidationError as err:
            raise ValidationFailed(REQUIRED_MESSAGE) from err
        except TypeError as err:
            # Non-string keys cannot be passed as keyword arguments.
            raise ValidationFailed(REQUIRED_MESSAGE) from err

    def create(self, payload: Mapping[str, Any] | None) -> dict:
        product = self._validate(payload)
        created: dict = {}

        def mutator(items: list[dict]) -> None:
            ids = [item["id"] for item in items if isinstance(item.get("id"), int)]
            created.update(product.to_record(max(ids) + 1 if ids else 1))
            items.append(created)

        self._store.mutate(mutator)
        return created

    def update(self, product_id: Any, payload: Mapping[str, Any] | None) -> dict:
        product = self._validate(payload)
        target = parse_int(product_id)
        updated: dict = {}

        def mutator(items: list[dict]) -> None:
            for idx, item in enumerate(items):
                if target is not None and item.get("id") == target:
                    updated.update(product.to_record(target))
                    items[idx] = updated
                    return
            raise NotFound()

        self._store.mutate(mutator)
        return updated

    def delete(self, product_id: Any) -> None:
        target = parse_int(product_id)

        def mutator(items: list[dict]) -> Iterable[dict]:
            remaining = [item for item in items if target is None or item.get("id") != target]
            if len(remaining) == len(items):
                raise NotFound()
            return remaining

        self._store.mutate(mutator)

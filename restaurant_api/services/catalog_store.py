from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from restaurant_api.core.errors import ConflictError, InternalServiceError, NotFoundError, ValidationError
from restaurant_api.models.category import Category
from restaurant_api.models.product import Product
from restaurant_api.models.product_modifier import ProductModifier
from restaurant_api.models.product_modifier_option import ProductModifierOption
from restaurant_api.models.user import User
from restaurant_api.schemas.catalog import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductModifierCreate,
    ProductModifierOptionCreate,
    ProductModifierOptionUpdate,
    ProductModifierUpdate,
    ProductUpdate,
    UserCreate,
    UserUpdate,
)
from restaurant_api.services.pricing import quantize_price

logger = logging.getLogger(__name__)
CATALOG_PREFIX = "[CATALOG]"

CREATE_SCHEMAS: dict[type, Type[BaseModel]] = {
    User: UserCreate,
    Category: CategoryCreate,
    Product: ProductCreate,
    ProductModifier: ProductModifierCreate,
    ProductModifierOption: ProductModifierOptionCreate,
}

UPDATE_SCHEMAS: dict[type, Type[BaseModel]] = {
    User: UserUpdate,
    Category: CategoryUpdate,
    Product: ProductUpdate,
    ProductModifier: ProductModifierUpdate,
    ProductModifierOption: ProductModifierOptionUpdate,
}

ENTITY_LABELS: dict[type, str] = {
    User: "User",
    Category: "Category",
    Product: "Product",
    ProductModifier: "Product modifier",
    ProductModifierOption: "Modifier option",
}

DUPLICATE_MESSAGES: dict[type, str] = {
    User: "email is already taken",
    ProductModifierOption: "Option for this product already exists in this modifier",
}

# filhos apagados na mesma transação antes do pai
CASCADE_CHILDREN: dict[type, list[tuple[type, str]]] = {
    ProductModifier: [(ProductModifierOption, "product_modifier_id")],
}

MONEY_FIELDS = {"price", "additional_price"}


def _format_pydantic_errors(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", ())) or "body"
        parts.append(f"{field}: {error.get('msg')}")
    return "; ".join(parts)


def _constraint_kind(exc: IntegrityError) -> str:
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None)
    message = str(orig or exc).lower()
    if pgcode == "23505" or "unique" in message or "duplicate" in message:
        return "duplicate"
    if pgcode == "23503" or "foreign key" in message:
        return "foreign_key"
    return "integrity"


class CatalogStore:
    """Sole writer of the catalog tables.

    Every create/update runs the entity's pydantic schema first (structural
    validation only). Database constraint violations are rolled back and
    surfaced as ``ConflictError`` so a concurrent writer that slips past the
    IntegrityGuard still gets a 422, not a crash.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    # -------------------------
    # validation
    # -------------------------
    def validate(self, model: type, fields: Mapping[str, Any], *, partial: bool = False) -> dict:
        schema = (UPDATE_SCHEMAS if partial else CREATE_SCHEMAS)[model]
        try:
            validated = schema.model_validate(dict(fields))
        except PydanticValidationError as exc:
            message = _format_pydantic_errors(exc)
            logger.warning("%s validation failed entity=%s errors=%s", CATALOG_PREFIX, model.__name__, message)
            raise ValidationError(message) from exc

        values = validated.model_dump(exclude_unset=partial)
        if partial:
            columns = model.__table__.columns
            for key, value in values.items():
                if value is None and key in columns and not columns[key].nullable:
                    raise ValidationError(f"{key}: can't be null")

        for key in MONEY_FIELDS & values.keys():
            if isinstance(values[key], Decimal):
                values[key] = quantize_price(values[key])
        return values

    # -------------------------
    # reads
    # -------------------------
    def read(self, model: type, entity_id: Optional[int]) -> Optional[Any]:
        if entity_id is None:
            return None
        return self.db.get(model, entity_id)

    def get_or_404(self, model: type, entity_id: int) -> Any:
        entity = self.read(model, entity_id)
        if entity is None:
            raise NotFoundError(f"{ENTITY_LABELS[model]} not found", details={"id": entity_id})
        return entity

    def query(
        self,
        model: type,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Iterable[Any]] = None,
    ) -> Query:
        query = self.db.query(model)
        for key, value in (filters or {}).items():
            query = query.filter(getattr(model, key) == value)
        return query.order_by(*(order if order is not None else (model.id.asc(),)))

    def list(
        self,
        model: type,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Iterable[Any]] = None,
    ) -> list:
        return self.query(model, filters, order).all()

    # -------------------------
    # writes
    # -------------------------
    def create(self, model: type, fields: Mapping[str, Any]) -> Any:
        values = self.validate(model, fields)
        entity = model(**values)
        self.db.add(entity)
        self._commit("create", model)
        self.db.refresh(entity)
        logger.info("%s created entity=%s id=%s", CATALOG_PREFIX, model.__name__, entity.id)
        return entity

    def update(self, model: type, entity_id: int, fields: Mapping[str, Any]) -> Any:
        entity = self.get_or_404(model, entity_id)
        values = self.validate(model, fields, partial=True)
        for key, value in values.items():
            setattr(entity, key, value)
        self._commit("update", model)
        self.db.refresh(entity)
        logger.info("%s updated entity=%s id=%s fields=%s", CATALOG_PREFIX, model.__name__, entity.id, sorted(values))
        return entity

    def delete(self, model: type, entity_id: int) -> None:
        entity = self.get_or_404(model, entity_id)
        for child_model, foreign_key in CASCADE_CHILDREN.get(model, []):
            removed = (
                self.db.query(child_model)
                .filter(getattr(child_model, foreign_key) == entity.id)
                .delete(synchronize_session=False)
            )
            logger.info(
                "%s cascade delete entity=%s parent_id=%s removed=%s",
                CATALOG_PREFIX,
                child_model.__name__,
                entity.id,
                removed,
            )
        self.db.delete(entity)
        self._commit("delete", model)
        logger.info("%s deleted entity=%s id=%s", CATALOG_PREFIX, model.__name__, entity_id)

    def _commit(self, action: str, model: type) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            kind = _constraint_kind(exc)
            logger.warning(
                "%s constraint violation action=%s entity=%s kind=%s",
                CATALOG_PREFIX,
                action,
                model.__name__,
                kind,
            )
            if kind == "duplicate":
                message = f"Duplicate entry: {DUPLICATE_MESSAGES.get(model, ENTITY_LABELS[model] + ' already exists')}"
            elif kind == "foreign_key":
                message = "Foreign key constraint violation"
            else:
                message = "Constraint violation"
            raise ConflictError(message, reason=kind) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("%s store failure action=%s entity=%s", CATALOG_PREFIX, action, model.__name__)
            raise InternalServiceError("Internal server error") from exc

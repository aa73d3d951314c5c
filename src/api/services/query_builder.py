# src/api/services/query_builder.py
"""
Listagens paginadas
===================

Contrato único de paginação, ordenação e busca para as três APIs
(admin, usuário, proprietário). Cada coleção declara os campos que
aceita em `sortBy` e os campos pesquisáveis; o resto é comum.
"""

import logging
from dataclasses import dataclass, field
from typing import Annotated, Any, Generic, Mapping, Optional, TypeVar

from fastapi import Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Query as OrmQuery

from src.api.schemas.shared.pagination import PaginationMeta
from src.api.services.rating_aggregator import rating_stats_subquery
from src.core import models
from src.core.exceptions import ValidationError
from src.core.utils.enums import SortOrder
from src.core.utils.validators import escape_like

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# OFFSET precisa caber em BIGINT
MAX_OFFSET = 2 ** 63 - 1
DEFAULT_SORT_BY = "createdAt"

# Campo derivado: não existe coluna, vem do join com as estatísticas
AVERAGE_RATING = "averageRating"


# ═══════════════════════════════════════════════════════════
# PARÂMETROS
# ═══════════════════════════════════════════════════════════

@dataclass
class ListParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = SortOrder.DESC.value
    search: Optional[str] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def direction(self) -> int:
        return SortOrder(self.sort_order).direction


def get_list_params(
        page: int = Query(DEFAULT_PAGE),
        limit: int = Query(DEFAULT_LIMIT),
        sort_by: str = Query(DEFAULT_SORT_BY, alias="sortBy"),
        sort_order: str = Query(SortOrder.DESC.value, alias="sortOrder"),
        search: Optional[str] = Query(None),
) -> ListParams:
    # Os limites são conferidos em validate_params, com as mensagens da API
    return ListParams(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order, search=search)


ListParamsDep = Annotated[ListParams, Depends(get_list_params)]


# ═══════════════════════════════════════════════════════════
# COLEÇÕES
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CollectionSpec:
    name: str
    # chave da API (camelCase) -> coluna
    sort_fields: Mapping[str, Any]
    id_column: Any
    search_fields: tuple = field(default_factory=tuple)


ADMIN_USERS = CollectionSpec(
    name="users",
    sort_fields={
        "name": models.User.name,
        "email": models.User.email,
        "address": models.User.address,
        "role": models.User.role,
        "createdAt": models.User.created_at,
    },
    id_column=models.User.id,
    search_fields=(models.User.name, models.User.email, models.User.address),
)

ADMIN_STORES = CollectionSpec(
    name="stores",
    sort_fields={
        "name": models.Store.name,
        "email": models.Store.email,
        "address": models.Store.address,
        "createdAt": models.Store.created_at,
        AVERAGE_RATING: AVERAGE_RATING,
    },
    id_column=models.Store.id,
    search_fields=(models.Store.name, models.Store.email, models.Store.address),
)

BROWSE_STORES = CollectionSpec(
    name="stores",
    sort_fields=ADMIN_STORES.sort_fields,
    id_column=models.Store.id,
    search_fields=(models.Store.name, models.Store.address),
)

_RATING_SORT_FIELDS = {
    "rating": models.Rating.rating,
    "createdAt": models.Rating.created_at,
    "updatedAt": models.Rating.updated_at,
}

MY_RATINGS = CollectionSpec(
    name="ratings",
    sort_fields=_RATING_SORT_FIELDS,
    id_column=models.Rating.id,
)

STORE_RATINGS = CollectionSpec(
    name="ratings",
    sort_fields=_RATING_SORT_FIELDS,
    id_column=models.Rating.id,
)

# Consulta base: Rating JOIN User
STORE_CUSTOMERS = CollectionSpec(
    name="customers",
    sort_fields={
        "name": models.User.name,
        "email": models.User.email,
        "rating": models.Rating.rating,
        "createdAt": models.Rating.created_at,
    },
    id_column=models.Rating.id,
    search_fields=(models.User.name, models.User.email),
)


# ═══════════════════════════════════════════════════════════
# CONSTRUÇÃO DA CONSULTA
# ═══════════════════════════════════════════════════════════

def validate_params(params: ListParams, spec: CollectionSpec) -> None:
    """Levanta ValidationError listando todos os parâmetros inválidos"""
    errors = []

    if params.page < 1:
        errors.append({"field": "page", "message": "Page must be a positive integer"})
    elif params.offset > MAX_OFFSET:
        errors.append({"field": "page", "message": "Page is out of range"})

    if not 1 <= params.limit <= MAX_LIMIT:
        errors.append({"field": "limit", "message": f"Limit must be between 1 and {MAX_LIMIT}"})

    if params.sort_by not in spec.sort_fields:
        allowed = ", ".join(spec.sort_fields)
        errors.append({"field": "sortBy", "message": f"Invalid sort field. Allowed: {allowed}"})

    if params.sort_order not in {order.value for order in SortOrder}:
        errors.append({"field": "sortOrder", "message": "Sort order must be asc or desc"})

    if errors:
        raise ValidationError(errors)


def apply_search(query: OrmQuery, search: Optional[str], spec: CollectionSpec) -> OrmQuery:
    """Substring sem diferenciar maiúsculas, OR entre os campos da coleção"""
    term = (search or "").strip()
    if not term or not spec.search_fields:
        return query

    pattern = f"%{escape_like(term)}%"
    return query.filter(
        or_(*[column.ilike(pattern, escape="\\") for column in spec.search_fields])
    )


def apply_sort(query: OrmQuery, params: ListParams, spec: CollectionSpec) -> OrmQuery:
    """Ordenação pedida + desempate estável por id"""
    sort_column = spec.sort_fields[params.sort_by]

    if params.sort_by == AVERAGE_RATING:
        stats = rating_stats_subquery()
        query = query.outerjoin(stats, stats.c.store_id == spec.id_column)
        sort_column = func.coalesce(stats.c.average_rating, 0)

    ordering = sort_column.asc() if params.direction > 0 else sort_column.desc()
    return query.order_by(ordering, spec.id_column.asc())


@dataclass
class Page(Generic[T]):
    items: list[T]
    pagination: PaginationMeta


def paginate(query: OrmQuery, params: ListParams, spec: CollectionSpec) -> Page:
    """
    Aplica busca, conta, ordena e recorta a página.

    O total considera o filtro completo (base + busca). Para o campo
    derivado averageRating a ordenação acontece no banco, antes do
    offset/limit, então a ordem vale entre páginas.
    """
    validate_params(params, spec)

    query = apply_search(query, params.search, spec)
    total_count = query.order_by(None).count()

    items = (
        apply_sort(query, params, spec)
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    logger.debug(
        f"Listagem {spec.name}: página {params.page} ({len(items)} de {total_count})"
    )

    return Page(
        items=items,
        pagination=PaginationMeta.build(params.page, params.limit, total_count),
    )

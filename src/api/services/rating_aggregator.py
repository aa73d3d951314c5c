# src/api/services/rating_aggregator.py
"""
Agregação de Avaliações
=======================

Média, total e distribuição de notas por loja. Nada aqui é armazenado:
os valores são derivados da tabela `ratings` a cada leitura.

- ✅ Lote em UMA query agrupada (sem N+1 nas listagens)
- ✅ Loja sem avaliações => média 0.0 e total 0
- ✅ Arredondamento decimal (meio para cima) em uma casa
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from src.core import models

RATING_VALUES = range(1, 6)
_ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class RatingSummary:
    average_rating: float = 0.0
    total_ratings: int = 0

    def as_dict(self) -> dict:
        return {"average_rating": self.average_rating, "total_ratings": self.total_ratings}


EMPTY_SUMMARY = RatingSummary()


def round_average(total_stars, total_ratings: int) -> float:
    """
    Média exata (soma / total) arredondada em uma casa decimal.

    Examples:
        >>> round_average(9, 2)
        4.5
        >>> round_average(10, 4)
        2.5
        >>> round_average(0, 0)
        0.0
    """
    if not total_ratings:
        return 0.0
    average = Decimal(int(total_stars)) / Decimal(int(total_ratings))
    return float(average.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def summarize_stores(db: Session, store_ids: Iterable[int]) -> dict[int, RatingSummary]:
    """
    Resumo de várias lojas de uma vez.

    Toda loja pedida aparece no resultado, mesmo sem avaliações.
    """
    ids = list(dict.fromkeys(store_ids))
    if not ids:
        return {}

    rows = (
        db.query(
            models.Rating.store_id,
            func.sum(models.Rating.rating),
            func.count(models.Rating.id),
        )
        .filter(models.Rating.store_id.in_(ids))
        .group_by(models.Rating.store_id)
        .all()
    )

    summaries = {store_id: EMPTY_SUMMARY for store_id in ids}
    for store_id, total_stars, total_ratings in rows:
        summaries[store_id] = RatingSummary(
            average_rating=round_average(total_stars, total_ratings),
            total_ratings=int(total_ratings),
        )
    return summaries


def summarize_store(db: Session, store_id: int) -> RatingSummary:
    return summarize_stores(db, [store_id])[store_id]


def rating_distribution(db: Session, store_id: int) -> dict[int, int]:
    """Histograma de notas; sempre com as cinco chaves"""
    distribution = {value: 0 for value in RATING_VALUES}

    rows = (
        db.query(models.Rating.rating, func.count(models.Rating.id))
        .filter(models.Rating.store_id == store_id)
        .group_by(models.Rating.rating)
        .all()
    )
    for value, count in rows:
        distribution[int(value)] = int(count)

    return distribution


def rating_stats_subquery():
    """Subquery (store_id, average_rating, total_ratings) para joins e ordenação"""
    return (
        select(
            models.Rating.store_id.label("store_id"),
            func.avg(models.Rating.rating).label("average_rating"),
            func.count(models.Rating.id).label("total_ratings"),
        )
        .group_by(models.Rating.store_id)
        .subquery("rating_stats")
    )


def recent_ratings(db: Session, store_id: int, limit: int) -> list[models.Rating]:
    """Últimas avaliações da loja, com o autor carregado"""
    return (
        db.query(models.Rating)
        .options(joinedload(models.Rating.user))
        .filter(models.Rating.store_id == store_id)
        .order_by(models.Rating.created_at.desc(), models.Rating.id.desc())
        .limit(limit)
        .all()
    )

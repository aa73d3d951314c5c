# schemas/store/__init__.py
from .store import (
    StoreCreate,
    StoreUpdate,
    StoreBrief,
    StoreSchema,
    StoreWithRating,
    StoreRatingBrief,
    StoreListResponse,
)

__all__ = [
    'StoreCreate',
    'StoreUpdate',
    'StoreBrief',
    'StoreSchema',
    'StoreWithRating',
    'StoreRatingBrief',
    'StoreListResponse',
]

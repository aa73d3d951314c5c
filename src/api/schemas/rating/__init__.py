# schemas/rating/__init__.py
from .rating import (
    RatingSubmit,
    RatingOut,
    RatingWithUser,
    RatingWithStore,
    CustomerRating,
    RatingSubmitResponse,
    MessageResponse,
    MyRatingsResponse,
    StoreRatingsResponse,
    StoreCustomersResponse,
)

__all__ = [
    'RatingSubmit',
    'RatingOut',
    'RatingWithUser',
    'RatingWithStore',
    'CustomerRating',
    'RatingSubmitResponse',
    'MessageResponse',
    'MyRatingsResponse',
    'StoreRatingsResponse',
    'StoreCustomersResponse',
]

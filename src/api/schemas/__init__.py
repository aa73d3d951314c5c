# schemas/__init__.py
from .base_schema import AppBaseModel
from .shared.pagination import PaginationMeta

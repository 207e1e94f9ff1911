from shared.models.user import CurrentUser
from shared.models.pagination import PaginationParams, PaginatedResponse, pagination_params

__all__ = ["CurrentUser", "PaginationParams", "PaginatedResponse", "pagination_params"]

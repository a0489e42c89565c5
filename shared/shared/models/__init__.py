from shared.models.user import CurrentUser
from shared.models.pagination import PaginationParams

__all__ = ["CurrentUser", "PaginationParams"]

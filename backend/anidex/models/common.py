from pydantic import BaseModel


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=(total + limit - 1) // limit)


def page_params(page: int, limit: int, max_limit: int = 100, default_limit: int = 20) -> tuple:
    """Normalize page/limit query values and return (page, limit, offset)."""
    if page < 1:
        page = 1
    if limit < 1 or limit > max_limit:
        limit = default_limit
    return page, limit, (page - 1) * limit

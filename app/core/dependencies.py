"""
Route dependencies.

`get_client` resolves the `grid_id` path parameter of a route into an
authorized `GridClient`, so routers can declare
`client: GridClient = Depends(get_client)`.
"""

from fastapi import HTTPException

from app.core.errors import GridError
from app.services.grid_client import GridClient
from app.services.grids_service import get_grid_client
from app.util.grid_helpers import to_http_exception


async def get_client(grid_id: str) -> GridClient:
    try:
        return await get_grid_client(grid_id)
    except GridError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

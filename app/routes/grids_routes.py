"""
Grid routes.

This module defines the API endpoints used to register the StorageGRID
tenants managed by this service. Each grid profile stores the management
address and the credentials used to obtain a bearer token; the other
routers address a grid by the id returned on creation.

All routes interact with the grid service layer
(`app.services.grids_service`). Secrets are never returned.
"""

from fastapi import APIRouter, HTTPException
from app.models.grid import Grid
from app.schemas.grid_read import GridRead
from app.services.grids_service import create_grid, delete_grid, get_all_grids, get_grid_by_id

router = APIRouter()


@router.post("", status_code=201)
async def create_grid_route(data: Grid):
    """
    Register a new grid profile.

    Args:
        data (Grid): Address and credentials of the grid tenant.

    Returns:
        dict: The identifier of the newly created profile.

    Example:
        >>> POST /grids
        {
            "name": "Production grid",
            "address": "https://grid.example.com",
            "account_id": "27733035335563454172",
            "username": "root",
            "password": "secret"
        }
    """

    inserted_id = await create_grid(data)
    if not inserted_id:
        raise HTTPException(status_code=500, detail="Failed to create grid")
    return {"id": inserted_id}


@router.get("", response_model=list[GridRead])
async def list_grids():
    """Retrieve all registered grid profiles, without their secrets."""

    return await get_all_grids()


@router.get("/{id}", response_model=GridRead)
async def get_grid(id: str):
    """
    Retrieve one grid profile.

    Raises:
        HTTPException: 404 if the profile does not exist.
    """

    try:
        return await get_grid_by_id(id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{id}")
async def delete_grid_route(id: str):
    """
    Delete a grid profile. Buckets on the grid are not touched.

    Raises:
        HTTPException: 404 if the profile does not exist.
    """

    try:
        await delete_grid(id)
        return {"message": "Grid deleted successfully"}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

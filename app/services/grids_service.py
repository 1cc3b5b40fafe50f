"""
Grids Service.

Stores grid connection profiles in MongoDB and builds authenticated
`GridClient` instances from them.

Handled responsibilities:
    - Registration, listing and removal of grid profiles
    - Removal of secrets from profiles returned to API callers
    - Creation of an authorized client for a stored profile
"""

import logging

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.results import DeleteResult

from app.db.client import get_db
from app.models.grid import Grid
from app.services.grid_client import GridClient

logger = logging.getLogger(__name__)

SECRET_FIELDS = ("password", "token")


def _object_id(id: str) -> ObjectId:
    try:
        return ObjectId(id)
    except (InvalidId, TypeError):
        raise ValueError("Grid not found")


def _public(grid: dict) -> dict:
    grid["id"] = str(grid["_id"])
    del grid["_id"]
    for secret in SECRET_FIELDS:
        grid.pop(secret, None)
    return grid


async def create_grid(grid: Grid) -> str:
    db = get_db()
    result = await db["grids"].insert_one(grid.model_dump())
    logger.info("Registered grid %s (%s)", grid.name, grid.address)
    return str(result.inserted_id)


async def get_all_grids() -> list[dict]:
    db = get_db()
    grids = await db["grids"].find().to_list(length=None)
    return [_public(g) for g in grids]


async def get_grid_by_id(id: str) -> dict:
    db = get_db()
    grid = await db["grids"].find_one({"_id": _object_id(id)})
    if not grid:
        raise ValueError("Grid not found")
    return _public(grid)


async def delete_grid(id: str):
    db = get_db()
    result: DeleteResult = await db["grids"].delete_one({"_id": _object_id(id)})
    if result.deleted_count == 0:
        raise ValueError("Grid not found")


async def get_grid_client(id: str) -> GridClient:
    """
    Builds an authorized client for a stored grid profile.

    The stored token is used when present; otherwise the stored user name
    and password are exchanged for a token.

    Args:
        id (str): MongoDB id of the grid profile.

    Raises:
        ValueError: If the profile does not exist.
        TransportError: If the grid refuses the credentials.

    Returns:
        GridClient: Client ready to send management API requests.
    """

    db = get_db()
    grid = await db["grids"].find_one({"_id": _object_id(id)})
    if not grid:
        raise ValueError("Grid not found")

    client = GridClient(grid["address"], token=grid.get("token"), insecure=grid.get("insecure", False))
    if not client.token:
        await client.authorize(grid["username"], grid["password"], grid.get("account_id"))
    return client

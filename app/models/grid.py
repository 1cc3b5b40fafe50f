"""
Grid model definition.

This module defines the data model of a grid connection profile. A
profile holds everything needed to talk to one tenant account of a
StorageGRID installation: the management address, the tenant account
and either a bearer token or a user name and password that are exchanged
for one.

Profiles are stored in MongoDB (collection `grids`) and turned into a
`GridClient` by `app.services.grids_service.get_grid_client`.
"""

from typing import Optional
from pydantic import BaseModel, model_validator


class Grid(BaseModel):
    """
    Represents a connection profile for a StorageGRID tenant.

    Example:
        >>> grid = Grid(
        ...     name="Production grid",
        ...     address="https://grid.example.com",
        ...     account_id="27733035335563454172",
        ...     username="root",
        ...     password="secret"
        ... )
        >>> print(grid.name)
        Production grid
    """

    name: str
    """Human-readable name of the grid profile."""

    description: Optional[str] = None
    """Optional text description of the profile."""

    address: str
    """Base address of the grid management API (e.g. `https://grid.example.com`)."""

    account_id: Optional[str] = None
    """Tenant account identifier used when authorizing."""

    username: Optional[str] = None
    """Tenant user name (used together with `password`)."""

    password: Optional[str] = None
    """Tenant user password."""

    token: Optional[str] = None
    """Pre-issued bearer token; takes precedence over user name and password."""

    insecure: bool = False
    """Skip TLS certificate verification."""

    @model_validator(mode="after")
    def check_credentials(self):
        if not self.token and not (self.username and self.password):
            raise ValueError("either a token or a username and password must be provided")
        return self

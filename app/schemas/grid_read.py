from pydantic import BaseModel
from typing import Optional


class GridRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    address: str
    account_id: Optional[str] = None
    username: Optional[str] = None
    insecure: bool = False

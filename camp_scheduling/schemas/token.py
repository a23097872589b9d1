# camp_scheduling/schemas/token.py
from typing import Optional

from pydantic import BaseModel


class TokenPayload(BaseModel):
    sub: str
    org_id: Optional[str] = None

from typing import Optional
from pydantic import BaseModel

from ..api.exceptions import NotFoundException


class Principal(BaseModel):
    """Authenticated caller of the API"""
    
    user_id: Optional[str] = None
    email: str
    role_global: str = "DOCENTE"
    
    def get_user_id_or_throw(self) -> str:
        if self.user_id is None:
            raise NotFoundException("User ID not found")
        return self.user_id

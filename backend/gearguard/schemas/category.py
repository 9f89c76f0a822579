from typing import Optional
from pydantic import BaseModel

class CategoryIn(BaseModel):
    # emptiness is checked after trimming, in the service
    name: Optional[str] = None

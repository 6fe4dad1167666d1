from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    name: str
    email: str
    description: Optional[str] = None
    id: Optional[int] = None

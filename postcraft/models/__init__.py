from postcraft.models.user import User
from postcraft.models.generation import Generation

__all__ = [
    "User",
    "Generation",
]

"""Repository facades over the key-value store.

    from infrastructure.database.repositories.plants import PlantRepository
"""

from infrastructure.database.repositories.plants import PlantRepository

__all__ = [
    "PlantRepository",
]

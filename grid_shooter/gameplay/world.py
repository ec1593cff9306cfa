"""
Thread-safe spatial store: the single source of truth for what occupies where.
NO UI DEPENDENCIES.
"""
import threading
from typing import Dict, Iterator, List, Optional

from .grid import Coord
from .entities import Entity


class WorldStore:
    """
    Mapping from position to entity, guarded by one lock.

    Writers are the simulation thread (every move, spawn and removal)
    and, during setup, the level builder. Readers are the simulation
    pass and the renderer. Every operation holds the lock for a single
    dict operation, except snapshot() which copies the mapping.

    The live mapping is never handed out; consumers that need a
    consistent view iterate a snapshot.
    """

    def __init__(self):
        self._objects: Dict[Coord, Entity] = {}
        self._lock = threading.Lock()

    def get(self, pos: Coord) -> Optional[Entity]:
        """Get the entity at a position, or None if the cell is empty."""
        with self._lock:
            return self._objects.get(pos)

    def set(self, entity: Entity) -> None:
        """Insert an entity at its own position, replacing any occupant."""
        with self._lock:
            self._objects[entity.position] = entity

    def remove(self, pos: Coord) -> Optional[Entity]:
        """Remove and return the entity at a position, if any."""
        with self._lock:
            return self._objects.pop(pos, None)

    def move(self, old_pos: Coord, entity: Entity) -> None:
        """
        Remove whatever is at old_pos and insert entity at its position.
        Both happen under one lock hold, so no reader sees the entity
        missing from both cells or present in both.
        """
        with self._lock:
            self._objects.pop(old_pos, None)
            self._objects[entity.position] = entity

    def snapshot(self) -> Dict[Coord, Entity]:
        """Get a consistent copy of the whole mapping."""
        with self._lock:
            return dict(self._objects)

    def entities(self) -> List[Entity]:
        """Get a consistent list of all entities."""
        with self._lock:
            return list(self._objects.values())

    def is_current(self, entity: Entity) -> bool:
        """Check whether this exact entity instance is still stored at its position."""
        with self._lock:
            return self._objects.get(entity.position) is entity

    def __contains__(self, pos: Coord) -> bool:
        with self._lock:
            return pos in self._objects

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities())

    def __repr__(self) -> str:
        return f"WorldStore({len(self)} entities)"

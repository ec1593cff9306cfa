"""
Grid entities: Wall, Enemy, Cursor, Bullet, Explosion.
NO UI DEPENDENCIES.

Entities are immutable. Every state change (a step, a consumed cursor
delta) produces a new instance via dataclasses.replace, which is then
written back to the WorldStore.
"""
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import ClassVar, Optional, Tuple

from .grid import Coord
from .constants import (
    WALL_GLYPH, ENEMY_GLYPH, CURSOR_GLYPH, BULLET_GLYPH, EXPLOSION_GLYPH,
    ENEMY_PATTERN, ENEMY_STEP_MS, BULLET_PATTERN, BULLET_STEP_MS,
    BULLET_TTL_MS, EXPLOSION_TTL_MS,
)


class EntityKind(Enum):
    """The closed set of things that can occupy a cell."""
    WALL = auto()
    ENEMY = auto()
    CURSOR = auto()
    BULLET = auto()
    EXPLOSION = auto()


class Category(Enum):
    """Governs which interaction rules apply to an entity."""
    ENVIRONMENT = auto()  # Passive, never moves
    PLAYER = auto()       # The single user-controlled entity
    COMPUTER = auto()     # Everything else that moves


@dataclass(frozen=True)
class Movement:
    """
    A looping step pattern with a fixed cadence.

    `index` points at the delta used for the previous step; advancing
    moves it forward first, wrapping at the end of the pattern.
    """
    deltas: Tuple[Coord, ...]
    interval: int      # ms between steps
    last_moved: int    # simulation time of the last scheduled step
    index: int

    def is_due(self, clock: int) -> bool:
        return clock >= self.last_moved + self.interval

    def advance(self) -> Tuple['Movement', Coord]:
        """
        Consume one step.
        Returns the rescheduled movement and the delta to apply.

        The schedule moves forward by exactly one interval rather than
        snapping to the current clock, so a late tick never shifts the
        cadence.
        """
        index = (self.index + 1) % len(self.deltas)
        updated = replace(self, index=index, last_moved=self.last_moved + self.interval)
        return updated, self.deltas[index]


@dataclass(frozen=True)
class Expiry:
    """Creation time plus time-to-live."""
    created: int
    ttl: int

    def is_expired(self, clock: int) -> bool:
        return clock >= self.created + self.ttl


@dataclass(frozen=True)
class Entity:
    """Base class for all grid entities."""
    position: Coord

    kind: ClassVar[EntityKind]
    category: ClassVar[Category]
    glyph: ClassVar[str]

    @property
    def name(self) -> str:
        return self.kind.name.lower()

    def moved_to(self, position: Coord) -> 'Entity':
        return replace(self, position=position)


@dataclass(frozen=True)
class Mover(Entity):
    """An entity that steps on its own schedule."""
    movement: Movement


@dataclass(frozen=True)
class Expiring(Entity):
    """An entity removed once its time-to-live has elapsed."""
    expiry: Expiry


@dataclass(frozen=True)
class Wall(Entity):
    kind = EntityKind.WALL
    category = Category.ENVIRONMENT
    glyph = WALL_GLYPH


@dataclass(frozen=True)
class Enemy(Mover):
    kind = EntityKind.ENEMY
    category = Category.COMPUTER
    glyph = ENEMY_GLYPH


@dataclass(frozen=True)
class Cursor(Entity):
    """The player. Moves only when input has queued a delta."""
    pending_delta: Optional[Coord] = None

    kind = EntityKind.CURSOR
    category = Category.PLAYER
    glyph = CURSOR_GLYPH

    def with_delta(self, delta: Optional[Coord]) -> 'Cursor':
        return replace(self, pending_delta=delta)


@dataclass(frozen=True)
class Bullet(Mover, Expiring):
    kind = EntityKind.BULLET
    category = Category.COMPUTER
    glyph = BULLET_GLYPH


@dataclass(frozen=True)
class Explosion(Expiring):
    kind = EntityKind.EXPLOSION
    category = Category.ENVIRONMENT
    glyph = EXPLOSION_GLYPH


def _pattern(deltas) -> Tuple[Coord, ...]:
    return tuple(Coord(dx, dy) for dx, dy in deltas)


# =============================================================================
# FACTORIES
# =============================================================================

def new_wall(pos: Coord) -> Wall:
    return Wall(position=pos)


def new_enemy(pos: Coord, clock: int = 0) -> Enemy:
    """Create an enemy whose first step is one interval after `clock`."""
    deltas = _pattern(ENEMY_PATTERN)
    return Enemy(
        position=pos,
        movement=Movement(
            deltas=deltas,
            interval=ENEMY_STEP_MS,
            last_moved=clock,
            # Start at the end so the first step uses the first delta
            index=len(deltas) - 1,
        ),
    )


def new_cursor(pos: Coord) -> Cursor:
    return Cursor(position=pos)


def new_bullet(pos: Coord, clock: int) -> Bullet:
    """Create a bullet flying upward, scheduled from the firing time."""
    deltas = _pattern(BULLET_PATTERN)
    return Bullet(
        position=pos,
        movement=Movement(
            deltas=deltas,
            interval=BULLET_STEP_MS,
            last_moved=clock,
            index=len(deltas) - 1,
        ),
        expiry=Expiry(created=clock, ttl=BULLET_TTL_MS),
    )


def new_explosion(pos: Coord, clock: int) -> Explosion:
    return Explosion(position=pos, expiry=Expiry(created=clock, ttl=EXPLOSION_TTL_MS))

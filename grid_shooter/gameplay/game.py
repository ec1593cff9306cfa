"""
Main Game class - the per-tick simulation over the shared WorldStore.
NO UI DEPENDENCIES.

This is the central gameplay module. It can be fully tested
without a terminal or any threads: construct a Game, queue intents,
call tick().
"""
import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import List, Optional

from ..errors import InvariantViolation
from .grid import Coord, Direction, in_interior, perimeter
from .entities import (
    Entity, Mover, Expiring, Cursor, EntityKind, Category,
    new_wall, new_cursor, new_bullet, new_explosion,
)
from .world import WorldStore
from .constants import (
    DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_FRAME_RATE_MS, DEFAULT_START_NUM_ENEMIES,
    MIN_GRID_SIZE,
)

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Current phase of the game."""
    RUNNING = auto()
    OVER = auto()       # Terminal: no further ticks mutate the world


@dataclass(frozen=True)
class GameConfig:
    """Construction-time parameters. There is no reconfiguration while running."""
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    frame_rate_ms: int = DEFAULT_FRAME_RATE_MS
    cursor_pos: Optional[Coord] = None
    start_num_enemies: int = DEFAULT_START_NUM_ENEMIES

    def __post_init__(self):
        if self.cursor_pos is None:
            object.__setattr__(self, 'cursor_pos', Coord(self.width // 2, max(1, self.height - 3)))
        else:
            object.__setattr__(self, 'cursor_pos', Coord(*self.cursor_pos))
        if self.width < MIN_GRID_SIZE or self.height < MIN_GRID_SIZE:
            raise ValueError(f"Grid must be at least {MIN_GRID_SIZE}x{MIN_GRID_SIZE}, got {self.width}x{self.height}")
        if not in_interior(self.cursor_pos, self.width, self.height):
            raise ValueError(f"Cursor position {self.cursor_pos} is not inside the wall ring")


# =============================================================================
# EVENTS
# =============================================================================

@dataclass
class GameEvent:
    """An event that occurred during a tick (for the UI to react to)."""
    pass


@dataclass
class EnemyKilledEvent(GameEvent):
    """A bullet and an enemy destroyed each other."""
    position: Coord
    score: int


@dataclass
class PlayerDiedEvent(GameEvent):
    """The cursor collided with something fatal. The game is over."""
    position: Coord
    cause: EntityKind


# =============================================================================
# INTENTS
# =============================================================================

class IntentType(Enum):
    MOVE = auto()
    FIRE = auto()


@dataclass
class Intent:
    """An input action waiting for the next tick."""
    action: IntentType
    delta: Optional[Coord] = None


class Game:
    """
    Owns the world and advances it one tick at a time.

    Only the thread calling tick() mutates the clock, score, phase and
    the tracked cursor position. Other threads talk to the game through
    queue_move() / queue_fire(), which are applied at the start of the
    next tick.

    Usage:
        game = Game(GameConfig(width=30, height=20))
        game.queue_move(Direction.UP)
        while not game.is_over:
            render_needed = game.tick()
    """

    def __init__(self, config: Optional[GameConfig] = None, world: Optional[WorldStore] = None):
        self.config = config if config else GameConfig()
        self.world = world if world is not None else WorldStore()

        # Simulation state
        self.clock: int = 0
        self.score: int = 0
        self.phase = GamePhase.RUNNING
        self.cursor_pos: Coord = self.config.cursor_pos

        # Intent queue, written by the input thread
        self._intents: List[Intent] = []
        self._intent_lock = threading.Lock()

        # Per-tick bookkeeping
        self._events: List[GameEvent] = []
        self._dirty = False

        self._build_arena()

    def _build_arena(self) -> None:
        """Place the cursor and the wall ring."""
        self.world.set(new_cursor(self.cursor_pos))
        for pos in perimeter(self.config.width, self.config.height):
            self.world.set(new_wall(pos))

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.OVER

    @property
    def events(self) -> List[GameEvent]:
        """Events produced by the most recent tick."""
        return list(self._events)

    # =========================================================================
    # COMMANDS (safe to call from any thread)
    # =========================================================================

    def queue_move(self, direction: Direction) -> None:
        """Queue a one-cell cursor move for the next tick."""
        self._queue(Intent(IntentType.MOVE, direction.delta()))

    def queue_fire(self) -> None:
        """Queue a shot from just above the cursor for the next tick."""
        self._queue(Intent(IntentType.FIRE))

    def _queue(self, intent: Intent) -> None:
        with self._intent_lock:
            self._intents.append(intent)

    # =========================================================================
    # DIRECT WORLD OPERATIONS (simulation thread only)
    # =========================================================================

    def spawn(self, entity: Entity) -> bool:
        """
        Place an entity on a free cell.
        Returns False if the cell is occupied.
        """
        if entity.position in self.world:
            return False
        self.world.set(entity)
        return True

    def find_cursor(self) -> Cursor:
        """Get the cursor entity, failing loudly if it is not where we track it."""
        cursor = self.world.get(self.cursor_pos)
        if not isinstance(cursor, Cursor):
            raise InvariantViolation(f"Couldn't find cursor at {self.cursor_pos}")
        return cursor

    def set_cursor_delta(self, delta: Coord) -> None:
        """Record a pending move on the cursor. It is applied by the next pass."""
        cursor = self.find_cursor()
        self.world.set(cursor.with_delta(delta))

    def fire(self) -> None:
        """
        Spawn a bullet one cell above the cursor, scheduled from the current clock.
        Firing into an occupied cell resolves as if the bullet had flown there.
        """
        bullet = new_bullet(self.cursor_pos + Direction.UP.delta(), self.clock)
        occupant = self.world.get(bullet.position)
        if occupant is None:
            self.world.set(bullet)
        else:
            self._interact(bullet, occupant)
        self._dirty = True

    # =========================================================================
    # UPDATE LOOP
    # =========================================================================

    def tick(self) -> bool:
        """
        Advance the simulation by one tick.
        Returns True if anything changed and the frame should be redrawn.
        """
        if self.is_over:
            return False

        self._events = []
        self._dirty = False

        self._apply_intents()

        for entity in self.world.entities():
            if self.is_over:
                break
            # Skip entities consumed earlier in this pass
            if not self.world.is_current(entity):
                continue
            self._update_entity(entity)

        self.clock += self.config.frame_rate_ms
        return self._dirty

    def _apply_intents(self) -> None:
        with self._intent_lock:
            intents, self._intents = self._intents, []

        for intent in intents:
            if self.is_over:
                return
            if intent.action == IntentType.MOVE:
                self.set_cursor_delta(intent.delta)
            elif intent.action == IntentType.FIRE:
                self.fire()

    def _update_entity(self, entity: Entity) -> None:
        """Apply the first matching rule to one entity."""
        if isinstance(entity, Mover) and entity.movement.is_due(self.clock):
            self._step(entity)
        elif isinstance(entity, Expiring) and entity.expiry.is_expired(self.clock):
            self.world.remove(entity.position)
            self._dirty = True
        elif isinstance(entity, Cursor) and entity.pending_delta is not None:
            self._move_cursor(entity)

    def _step(self, entity: Mover) -> None:
        movement, delta = entity.movement.advance()
        stepped = replace(entity, movement=movement)
        destination = entity.position + delta

        occupant = self.world.get(destination)
        if occupant is None:
            self.world.move(entity.position, stepped.moved_to(destination))
            self._dirty = True
            return

        # Blocked: the stored mover is left as is, so it retries the same
        # delta on the next tick
        self._interact(entity, occupant)
        # A mover stuck against something never reaches the expiry rule
        if (isinstance(entity, Expiring) and entity.expiry.is_expired(self.clock)
                and self.world.is_current(entity)):
            self.world.remove(entity.position)
            self._dirty = True

    def _move_cursor(self, cursor: Cursor) -> None:
        destination = self.cursor_pos + cursor.pending_delta
        cleared = cursor.with_delta(None)

        occupant = self.world.get(destination)
        if occupant is None:
            self.world.move(cursor.position, cleared.moved_to(destination))
            self.cursor_pos = destination
        else:
            self.world.set(cleared)
            self._interact(cleared, occupant)
        self._dirty = True

    # =========================================================================
    # INTERACTIONS
    # =========================================================================

    def _interact(self, mover: Entity, occupant: Entity) -> None:
        """
        Resolve a mover trying to enter an occupied cell.
        Rules are checked in priority order; the first match wins.
        """
        categories = {mover.category, occupant.category}
        kinds = {mover.kind, occupant.kind}

        if categories == {Category.PLAYER, Category.COMPUTER}:
            self.world.remove(mover.position)
            self.world.remove(occupant.position)
            self.world.set(new_explosion(occupant.position, self.clock))
            other = occupant if occupant.category == Category.COMPUTER else mover
            self._end_game(occupant.position, other.kind)
            self._dirty = True

        # Environment never moves, so the player is always the mover here
        elif mover.category == Category.PLAYER and occupant.category == Category.ENVIRONMENT:
            self.world.remove(mover.position)
            self.world.set(new_explosion(mover.position, self.clock))
            self._end_game(mover.position, occupant.kind)
            self._dirty = True

        elif kinds == {EntityKind.ENEMY, EntityKind.BULLET}:
            struck = occupant if occupant.kind == EntityKind.ENEMY else mover
            self.world.remove(mover.position)
            self.world.remove(occupant.position)
            self.world.set(new_explosion(struck.position, self.clock))
            self.score += 1
            self._dirty = True
            self._events.append(EnemyKilledEvent(struck.position, self.score))
            logger.debug(f"Enemy destroyed at {struck.position}, score {self.score}")

        # Anything else: the mover simply stays where it is

    def _end_game(self, position: Coord, cause: EntityKind) -> None:
        self.phase = GamePhase.OVER
        self._events.append(PlayerDiedEvent(position, cause))
        logger.info(
            f"Game over at tick clock {self.clock}ms: player hit {cause.name.lower()} "
            f"at {position}, score {self.score}"
        )

    # =========================================================================
    # CONVENIENCE METHODS FOR TESTING
    # =========================================================================

    def simulate(self, ms: int) -> List[GameEvent]:
        """
        Run ticks until `ms` of simulation time has passed or the game ends.
        Returns all events that occurred.
        """
        all_events = []
        end = self.clock + ms
        while self.clock < end and not self.is_over:
            self.tick()
            all_events.extend(self._events)
        return all_events

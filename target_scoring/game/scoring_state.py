"""
Session score bookkeeping.
"""
from typing import Callable, List, Optional
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)

ScoreListener = Callable[[int], None]


@dataclass
class ScoringState:
    """
    Running score for one video session.

    The only scoring state that survives between frames. Listeners are
    notified synchronously with the new total whenever it changes.
    """
    total_score: int = 0
    last_hit_time: Optional[float] = None
    hit_count: int = 0

    _listeners: List[ScoreListener] = field(
        default_factory=list, repr=False, compare=False
    )

    @property
    def score(self) -> int:
        """Current total score."""
        return self.total_score

    def add_points(self, points: int) -> None:
        """
        Add points for one accepted hit.

        Args:
            points: Points awarded (must be >= 0)

        Raises:
            ValueError: If points is negative
        """
        if points < 0:
            raise ValueError(f"Cannot add negative points: {points}")

        self.total_score += points
        self.hit_count += 1
        logger.debug(f"+{points} points (Total: {self.total_score})")
        self._notify()

    def record_hit(self, timestamp: float) -> None:
        """Remember when the last hit was accepted."""
        self.last_hit_time = timestamp

    def reset(self) -> None:
        """Clear score and hit history for a new session."""
        self.total_score = 0
        self.last_hit_time = None
        self.hit_count = 0
        logger.info("Scoring state reset")
        self._notify()

    def subscribe(self, listener: ScoreListener) -> Callable[[], None]:
        """
        Register a score listener.

        Args:
            listener: Called with the new total after every change

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.total_score)
            except Exception:
                logger.exception("Score listener failed")

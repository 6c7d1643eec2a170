"""
intent.py: Turns the continuous control signal into discrete start/restart intents.
"""

from dataclasses import dataclass

from .constants import MOVEMENT_THRESHOLD, MOVEMENT_COOLDOWN_TICKS


@dataclass
class MovementIntentDetector:
    """
    Edge-triggered debounce over the control value. Cooldown is counted in
    ticks, so callers must invoke update() at a stable rate.
    """
    threshold: float = MOVEMENT_THRESHOLD
    cooldown_ticks: int = MOVEMENT_COOLDOWN_TICKS
    last_value: float = 0.5
    cooldown: int = 0

    def update(self, value: float) -> bool:
        """Returns True when this tick's movement should start or restart a run."""
        if self.cooldown > 0:
            self.cooldown -= 1
            return False

        fired = abs(value - self.last_value) > self.threshold
        if fired:
            self.cooldown = self.cooldown_ticks

        self.last_value = value
        return fired

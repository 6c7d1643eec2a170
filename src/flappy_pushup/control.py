"""
control.py: Normalizes a raw vertical body coordinate into the control signal.

The raw value is whatever the input source measures in [0, 1] with 0 at the
top of the frame: the averaged shoulder height from a pose model, or the
mouse position in the pygame client.
"""

from typing import List, Optional

from .constants import SHOULDER_SMOOTHING, MIN_CALIBRATION_RANGE
from .data_models import ControlSignal
from .errors import SignalUnavailable


class ShoulderTracker:
    """Smooths raw samples and rescales them against the observed range."""

    def __init__(self, smoothing: float = SHOULDER_SMOOTHING,
                 min_range: float = MIN_CALIBRATION_RANGE):
        self.smoothing = smoothing
        self.min_range = min_range
        self.shoulder_y = 0.5
        self.min_y: Optional[float] = None
        self.max_y: Optional[float] = None
        self.present = False
        self.calibrating = False
        self.calibration_samples: List[float] = []

    def observe(self, raw_y: float):
        self.present = True
        self.shoulder_y = self.shoulder_y * (1 - self.smoothing) + raw_y * self.smoothing

        if self.calibrating:
            self.calibration_samples.append(raw_y)

        if self.min_y is None or self.max_y is None:
            self.min_y = self.max_y = raw_y
        else:
            self.min_y = min(self.min_y, raw_y)
            self.max_y = max(self.max_y, raw_y)

    def lose(self):
        """The source produced no sample this frame. Calibration is kept."""
        self.present = False

    @property
    def has_pose(self) -> bool:
        return self.present and self.min_y is not None

    def normalized_y(self) -> float:
        """0 = top of the observed range, 1 = bottom. 0.5 until the range is usable."""
        if not self.present or self.min_y is None or self.max_y is None:
            raise SignalUnavailable("no current sample")

        span = self.max_y - self.min_y
        if span < self.min_range:
            return 0.5

        return max(0.0, min(1.0, (self.shoulder_y - self.min_y) / span))

    def signal(self) -> ControlSignal:
        try:
            return ControlSignal(normalized_shoulder_y=self.normalized_y(), has_pose=True)
        except SignalUnavailable:
            return ControlSignal(has_pose=False)

    def start_calibration(self):
        self.calibrating = True
        self.calibration_samples = []
        self.min_y = None
        self.max_y = None

    def end_calibration(self):
        self.calibrating = False
        if self.calibration_samples:
            self.min_y = min(self.calibration_samples)
            self.max_y = max(self.calibration_samples)

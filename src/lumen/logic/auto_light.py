"""
Auto Light Policy

Turns per-frame ambient light estimates into AUTO light decisions.

Intensity is normalized: 0.0 is dark, 1.0 is bright. Two thresholds form a
hysteresis band so the light does not chatter around a single cutoff:

- intensity below `low_threshold` wants the light on
- intensity above `high_threshold` wants the light off
- anything in between keeps the current state

A wanted change must persist for `confirm_frames` consecutive frames before
it is emitted. Any frame that agrees with the current state resets the count.
"""
from typing import Optional
import structlog

logger = structlog.get_logger(__name__)


class AutoLightPolicy:
    """Hysteresis and frame-confirmation filter for AUTO light signals"""

    def __init__(
        self,
        low_threshold: float = 0.2,
        high_threshold: float = 0.4,
        confirm_frames: int = 15,
    ):
        if low_threshold > high_threshold:
            raise ValueError(
                f"low_threshold ({low_threshold}) must not exceed high_threshold ({high_threshold})"
            )
        if confirm_frames < 1:
            raise ValueError(f"confirm_frames must be at least 1, got {confirm_frames}")

        self.low_threshold = low_threshold
        self.high_threshold = high_threshold
        self.confirm_frames = confirm_frames

        self.current_state = False
        self.pending_state = False
        self.pending_frames = 0
        self.decisions = 0

    def update(self, intensity: float) -> Optional[bool]:
        """
        Feed one frame's ambient intensity

        Args:
            intensity: Normalized ambient light (0.0 dark - 1.0 bright)

        Returns:
            The new light state when a change is confirmed, otherwise None
        """
        target = self.current_state
        if intensity < self.low_threshold:
            target = True
        elif intensity > self.high_threshold:
            target = False

        if target == self.current_state:
            self.pending_frames = 0
            self.pending_state = self.current_state
            return None

        if target != self.pending_state:
            self.pending_state = target
            self.pending_frames = 0

        self.pending_frames += 1
        if self.pending_frames < self.confirm_frames:
            return None

        self.current_state = target
        self.pending_frames = 0
        self.decisions += 1
        logger.debug("auto_light_decision", enable=target, intensity=round(intensity, 3))
        return target

    def reset(self, state: bool = False) -> None:
        """Forget pending frames and assume the light is in `state`"""
        self.current_state = state
        self.pending_state = state
        self.pending_frames = 0

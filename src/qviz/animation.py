"""
Arrow interpolation for Bloch-sphere animations.

Nothing here touches a circuit's state: frames are computed from the angles a
front end last drew and the angles it should end on.
"""
from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from .gates import GateKind

ANIMATION_DURATION = 1.0  # seconds
THETA_SNAP = 0.01

Angles = Tuple[float, float]


def _nan_to_zero(x: float) -> float:
    return 0.0 if math.isnan(x) else x


def interpolate_angles(
    start: Angles,
    target: Angles,
    progress: float,
    last_kind: Optional[GateKind] = None,
) -> Angles:
    """
    Angles to draw at `progress` in [0, 1] of the way from `start` to `target`.

    After an RX the arrow turns in the plane of the X rotation, so phi is held
    at -pi/2 while theta moves. The last frame is always `target` itself.
    """
    progress = min(max(progress, 0.0), 1.0)
    if progress >= 1.0:
        return _nan_to_zero(target[0]), _nan_to_zero(target[1])

    theta0, phi0 = start
    theta1, phi1 = target

    if last_kind == GateKind.RX:
        phi = -math.pi / 2
        theta = theta0 + (theta1 - theta0) * progress
    else:
        if abs(theta0 - theta1) < THETA_SNAP:
            theta = theta1
        else:
            theta = theta0 + (theta1 - theta0) * progress

        # shortest way round
        delta = phi1 - phi0
        if delta > math.pi:
            delta -= 2 * math.pi
        if delta < -math.pi:
            delta += 2 * math.pi
        phi = phi0 + delta * progress

    return _nan_to_zero(theta), _nan_to_zero(phi)


@dataclass
class ArrowAnimation:
    starts: Sequence[Angles]
    targets: Sequence[Angles]
    last_kinds: Sequence[Optional[GateKind]] = ()
    duration: float = ANIMATION_DURATION
    started_at: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        if len(self.starts) != len(self.targets):
            raise ValueError("starts and targets must have the same length")
        if self.duration <= 0:
            raise ValueError("duration must be positive")

    def progress(self, now: Optional[float] = None) -> float:
        if now is None:
            now = time.monotonic()
        return min(max((now - self.started_at) / self.duration, 0.0), 1.0)

    def done(self, now: Optional[float] = None) -> bool:
        return self.progress(now) >= 1.0

    def frame(self, now: Optional[float] = None) -> list[Angles]:
        p = self.progress(now)
        frames = []
        for q, (start, target) in enumerate(zip(self.starts, self.targets)):
            kind = self.last_kinds[q] if q < len(self.last_kinds) else None
            frames.append(interpolate_angles(start, target, p, kind))
        return frames

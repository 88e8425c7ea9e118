"""
Morning sunlight requirement.

Overcast skies cut the light that reaches the eye, so the daily exposure
target doubles when more than half the sky is covered:

  - cloud cover <= 50%: 10 minutes
  - cloud cover  > 50%: 20 minutes

The weather collaborator pushes UV index and cloud cover; the exposure
collaborator pushes accumulated minutes outside. This module only derives
the target and clamps progress.
"""
import threading
from dataclasses import dataclass

CLEAR_SKY_MINUTES = 10
OVERCAST_MINUTES = 20
OVERCAST_THRESHOLD = 0.5


def required_minutes_for(cloud_cover: float) -> int:
    """Required exposure for a cloud cover ratio in [0, 1]."""
    return OVERCAST_MINUTES if cloud_cover > OVERCAST_THRESHOLD else CLEAR_SKY_MINUTES


def exposure_progress(current_minutes: int, required_minutes: int) -> float:
    """Fraction of the target reached, clamped to [0, 1]. 0.0 for a zero target."""
    if required_minutes <= 0:
        return 0.0
    return max(0.0, min(current_minutes / required_minutes, 1.0))


@dataclass(frozen=True)
class SolarState:
    uv_index: int
    required_minutes: int
    current_minutes: int
    progress: float

    @property
    def required_text(self) -> str:
        return f"{self.required_minutes} MIN NEEDED"

    @property
    def status_text(self) -> str:
        if self.current_minutes >= self.required_minutes:
            return "COMPLETE"
        return f"{self.required_minutes - self.current_minutes} MIN REMAINING"


class SolarRequirement:
    """Last weather reading plus accumulated exposure."""

    def __init__(self, uv_index: int = 0, cloud_cover: float = 0.0):
        self._uv_index = max(0, int(uv_index))
        self._cloud_cover = _clamp_ratio(cloud_cover)
        self._current_minutes = 0
        self._lock = threading.Lock()

    @property
    def uv_index(self) -> int:
        return self._uv_index

    @property
    def cloud_cover(self) -> float:
        return self._cloud_cover

    @property
    def required_minutes(self) -> int:
        return required_minutes_for(self._cloud_cover)

    @property
    def current_minutes(self) -> int:
        return self._current_minutes

    def update_reading(self, uv_index: int, cloud_cover: float) -> None:
        """Replace UV index and cloud cover together."""
        with self._lock:
            self._uv_index = max(0, int(uv_index))
            self._cloud_cover = _clamp_ratio(cloud_cover)

    def update_exposure(self, minutes: int) -> None:
        # Whatever the collaborator reports wins, even if it went down.
        with self._lock:
            self._current_minutes = max(0, int(minutes))

    def snapshot(self) -> SolarState:
        with self._lock:
            uv_index = self._uv_index
            cloud_cover = self._cloud_cover
            current = self._current_minutes
        required = required_minutes_for(cloud_cover)
        return SolarState(
            uv_index=uv_index,
            required_minutes=required,
            current_minutes=current,
            progress=exposure_progress(current, required),
        )


def _clamp_ratio(value: float) -> float:
    return max(0.0, min(float(value), 1.0))

"""
Horizon model - interpreted reflector picks on a gather.

A horizon holds at most one pick per trace, ordered by trace index so
that the polyline and AVO extraction see picks in lateral order
regardless of the order in which they were made.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HorizonPoint:
    """
    A single pick on one trace.

    Attributes:
        trace_index: Index of the picked trace
        sample_index: Picked sample on that trace
        time_ms: sample_index * sample_interval
        amplitude: Sample value at pick time (snapshot, not recomputed)
    """
    trace_index: int
    sample_index: int
    time_ms: float
    amplitude: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'traceIndex': self.trace_index,
            'sampleIndex': self.sample_index,
            'timeMs': self.time_ms,
            'amplitude': self.amplitude,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'HorizonPoint':
        return cls(
            trace_index=int(d['traceIndex']),
            sample_index=int(d['sampleIndex']),
            time_ms=float(d['timeMs']),
            amplitude=float(d['amplitude']),
        )


@dataclass
class Horizon:
    """
    Named, colored set of picks ordered by trace index.

    Attributes:
        name: Display name
        color: Display color (hex string)
        points: Picks, ascending by trace_index, unique per trace
        is_visible: Visibility flag for the display layer
        id: Stable identifier
    """
    name: str = 'Horizon'
    color: str = '#3b82f6'
    points: List[HorizonPoint] = field(default_factory=list)
    is_visible: bool = True
    id: str = field(default_factory=lambda: uuid4().hex[:8])

    def __post_init__(self):
        # Normalize points loaded from elsewhere: last pick per trace wins
        unique: Dict[int, HorizonPoint] = {}
        for point in self.points:
            unique[point.trace_index] = point
        self.points = sorted(unique.values(), key=lambda p: p.trace_index)

    def __len__(self) -> int:
        return len(self.points)

    def add_or_replace_point(self, point: HorizonPoint) -> None:
        """
        Add a pick, replacing any existing pick on the same trace.

        A replaced pick keeps its slot; a new pick is inserted and the
        collection re-sorted by trace index.
        """
        for i, existing in enumerate(self.points):
            if existing.trace_index == point.trace_index:
                self.points[i] = point
                logger.debug(f"Horizon {self.name}: replaced pick on trace {point.trace_index}")
                return

        self.points.append(point)
        self.points.sort(key=lambda p: p.trace_index)

    def get_point(self, trace_index: int) -> Optional[HorizonPoint]:
        """Get the pick on a trace, or None."""
        for point in self.points:
            if point.trace_index == trace_index:
                return point
        return None

    def remove_point(self, trace_index: int) -> bool:
        """Remove the pick on a trace. Returns True if a pick was removed."""
        before = len(self.points)
        self.points = [p for p in self.points if p.trace_index != trace_index]
        return len(self.points) != before

    def clear(self) -> None:
        self.points = []

    def to_dict(self) -> Dict[str, Any]:
        """Serialize horizon (field names follow the exported JSON layout)."""
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'points': [p.to_dict() for p in self.points],
            'isVisible': self.is_visible,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Horizon':
        """Deserialize horizon from dictionary."""
        return cls(
            name=d.get('name', 'Horizon'),
            color=d.get('color', '#3b82f6'),
            points=[HorizonPoint.from_dict(p) for p in d.get('points', [])],
            is_visible=d.get('isVisible', True),
            id=d.get('id') or uuid4().hex[:8],
        )

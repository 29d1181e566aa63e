"""
Scan Session State

The scan screen alternates between a live mode, where every analyzed frame
replaces the detection list, and a frozen mode, where the last snapshot is
turned into editable objects the user can drag around before comparing.

State changes are modelled as a pure reducer:

    state = reduce(state, event)

Events:
    FrameAnalyzed(detections)   new detector output (ignored while frozen)
    Freeze()                    snapshot detections into editable objects
    Resume()                    drop edits and go back to live detection
    DragStart(index)            select an editable object
    DragMove(dx, dy)            translate the selected object's offset
    DragEnd()                   commit the offset into the bounding box

All coordinates are normalized, like the detector's boxes.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple, Union

from ..data_models import BoundingBox, Detection


@dataclass(frozen=True)
class EditableObject:
    """
    A frozen detection the user may move.

    Attributes:
        detection: Detection the object was created from
        offset: Pending drag translation (dx, dy)
    """
    detection: Detection
    offset: Tuple[float, float] = (0.0, 0.0)

    @property
    def bounding_box(self) -> BoundingBox:
        """Box with the pending offset applied."""
        dx, dy = self.offset
        return self.detection.bounding_box.translated(dx, dy)

    @property
    def moved(self) -> bool:
        return self.offset != (0.0, 0.0)

    def committed(self) -> "EditableObject":
        """Fold the offset into the detection's box."""
        detection = replace(self.detection, bounding_box=self.bounding_box)
        return EditableObject(detection=detection)


@dataclass(frozen=True)
class ScanState:
    """
    Immutable scan screen state.

    Attributes:
        frozen: Whether live detection is paused
        detections: Latest live detection snapshot
        objects: Editable objects (only populated while frozen)
        selected: Index of the object being dragged, if any
    """
    frozen: bool = False
    detections: Tuple[Detection, ...] = ()
    objects: Tuple[EditableObject, ...] = ()
    selected: Optional[int] = None

    def snapshot(self) -> List[Detection]:
        """
        Detections to hand to the comparator: the edited objects while
        frozen, the latest live frame otherwise.
        """
        if not self.frozen:
            return list(self.detections)
        return [replace(o.detection, bounding_box=o.bounding_box) for o in self.objects]


@dataclass(frozen=True)
class FrameAnalyzed:
    detections: Tuple[Detection, ...]


@dataclass(frozen=True)
class Freeze:
    pass


@dataclass(frozen=True)
class Resume:
    pass


@dataclass(frozen=True)
class DragStart:
    index: int


@dataclass(frozen=True)
class DragMove:
    dx: float
    dy: float


@dataclass(frozen=True)
class DragEnd:
    pass


ScanEvent = Union[FrameAnalyzed, Freeze, Resume, DragStart, DragMove, DragEnd]


def reduce(state: ScanState, event: ScanEvent) -> ScanState:
    """
    Apply one user or detector event to the scan state.

    Events that make no sense in the current mode (frames while frozen,
    drags while live, moves with nothing selected) leave the state
    unchanged.

    Raises:
        IndexError: DragStart with an index outside the object list
        TypeError: unknown event type
    """
    if isinstance(event, FrameAnalyzed):
        if state.frozen:
            return state
        return replace(state, detections=tuple(event.detections))

    if isinstance(event, Freeze):
        if state.frozen:
            return state
        objects = tuple(EditableObject(detection=d) for d in state.detections)
        return replace(state, frozen=True, objects=objects, selected=None)

    if isinstance(event, Resume):
        return replace(state, frozen=False, objects=(), selected=None)

    if isinstance(event, DragStart):
        if not state.frozen:
            return state
        if not 0 <= event.index < len(state.objects):
            raise IndexError(
                f"No editable object at index {event.index} "
                f"({len(state.objects)} objects)"
            )
        return replace(state, selected=event.index)

    if isinstance(event, DragMove):
        if state.selected is None:
            return state
        objects = list(state.objects)
        target = objects[state.selected]
        dx, dy = target.offset
        objects[state.selected] = replace(target, offset=(dx + event.dx, dy + event.dy))
        return replace(state, objects=tuple(objects))

    if isinstance(event, DragEnd):
        if state.selected is None:
            return state
        objects = list(state.objects)
        objects[state.selected] = objects[state.selected].committed()
        return replace(state, objects=tuple(objects), selected=None)

    raise TypeError(f"Unknown scan event: {event!r}")

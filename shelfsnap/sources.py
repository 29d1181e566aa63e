"""
Data Sources

Interfaces for the collaborators that feed the comparator, plus in-memory
and file-backed implementations used by the CLI and tests:

- DetectionSource: latest normalized detection snapshot
- PlanogramDataSource: planogram records and their items, by id

Sources only return already-normalized data. Pixel conversion and
orientation correction happen before detections reach this package.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple

from .data_models import ComparisonScenario, Detection, Planogram, PlanogramItem


class DetectionSource(Protocol):
    """Yields the most recent detection snapshot."""

    def latest(self) -> List[Detection]:
        ...


class PlanogramDataSource(Protocol):
    """Provides planograms and their full item sets."""

    def get_planogram(self, planogram_id: str) -> Planogram:
        ...

    def get_items(self, planogram_id: str) -> List[PlanogramItem]:
        ...


class StaticDetectionSource:
    """
    Replays a fixed sequence of frames.

    Each ``advance()`` moves to the next frame; ``latest()`` returns a copy
    of the current one, never an accumulation of earlier frames.
    """

    def __init__(self, frames: Iterable[Sequence[Detection]]):
        self._frames: List[Tuple[Detection, ...]] = [tuple(f) for f in frames]
        self._position = 0 if self._frames else -1

    def latest(self) -> List[Detection]:
        if self._position < 0:
            return []
        return list(self._frames[self._position])

    def advance(self) -> bool:
        """Move to the next frame. Returns False once the last frame is reached."""
        if self._position + 1 >= len(self._frames):
            return False
        self._position += 1
        return True

    def __iter__(self) -> Iterator[List[Detection]]:
        for frame in self._frames:
            yield list(frame)


class InMemoryPlanogramSource:
    """Planogram source backed by dictionaries."""

    def __init__(
        self,
        planograms: Iterable[Planogram] = (),
        items: Iterable[PlanogramItem] = ()
    ):
        self._planograms: Dict[str, Planogram] = {}
        self._items: Dict[str, List[PlanogramItem]] = {}
        for planogram in planograms:
            self.add_planogram(planogram)
        for item in items:
            self.add_item(item)

    def add_planogram(self, planogram: Planogram, items: Optional[Iterable[PlanogramItem]] = None) -> None:
        self._planograms[planogram.id] = planogram
        self._items.setdefault(planogram.id, [])
        for item in items or ():
            self.add_item(item)

    def add_item(self, item: PlanogramItem) -> None:
        self._items.setdefault(item.planogram_id, []).append(item)

    def list_planograms(self) -> List[Planogram]:
        return list(self._planograms.values())

    def get_planogram(self, planogram_id: str) -> Planogram:
        """
        Raises:
            KeyError: if the planogram is unknown
        """
        try:
            return self._planograms[planogram_id]
        except KeyError:
            raise KeyError(f"Unknown planogram {planogram_id!r}") from None

    def get_items(self, planogram_id: str) -> List[PlanogramItem]:
        return list(self._items.get(planogram_id, []))


class JsonPlanogramSource(InMemoryPlanogramSource):
    """Planogram source loaded from a scenario JSON file."""

    def __init__(self, filepath: str):
        scenario = ComparisonScenario.load_from_json(filepath)
        super().__init__(planograms=[scenario.planogram], items=scenario.items)
        self.filepath = filepath

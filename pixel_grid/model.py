"""Sparse grid model.

The model stores painted :class:`~pixel_grid.types.Element` values in a
persistent map keyed by an integer produced by
:func:`~pixel_grid.utils.encoder.encode`. The grid itself is unbounded, so the
keys are encoded relative to a bounding box (:class:`ModelPosition`) that grows
to cover every stored element. Dimensions are only needed while encoding.

Design notes:

* All transformations are pure functions from one :class:`GridStore` snapshot
  to the next (``apply_change``, ``apply_changes``, ``shift_store``). The
  mutable :class:`GridModel` just swaps snapshots, which makes previews free:
  :meth:`GridModel.get_elements` applies extra changes to a throwaway snapshot.
* Elements keep absolute coordinates; keys are relative to the bounding box
  offset, so shifting only moves the box and rewrites element coordinates.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

from pyrsistent import ny, pmap
from pyrsistent.typing import PMap

from pixel_grid.frame import ORIGIN, Dimensions, Frame, Position
from pixel_grid.types import Change, Element, ModelAction
from pixel_grid.utils.encoder import encode

# Extra cells added around the bounding box whenever it has to grow, so that
# a stroke moving outward does not re-key the store on every sample.
GROWTH_MARGIN = 8

EMPTY_DIMENSIONS = Dimensions(0, 0)


@dataclass(frozen=True)
class ModelPosition:
    """Bounding box of the encoded key space.

    Attributes:
        offset: Absolute coordinate encoded as key ``0``.
        dimensions: Size of the box; every stored element lies inside it.
    """

    offset: Position = ORIGIN
    dimensions: Dimensions = EMPTY_DIMENSIONS

    @property
    def empty(self) -> bool:
        return self.dimensions.width == 0 or self.dimensions.height == 0

    def covers(self, position: Position) -> bool:
        return Frame(self.dimensions, self.offset).contains(position)

    def key(self, position: Position) -> int:
        return encode(position - self.offset, self.dimensions)


@dataclass(frozen=True)
class GridStore:
    """Immutable snapshot of the model.

    Attributes:
        position: Bounding box used to encode keys.
        elements: Encoded key -> element (absolute coordinates).
    """

    position: ModelPosition = ModelPosition()
    elements: PMap[int, Element] = pmap()


def _grow(position: ModelPosition, targets: Sequence[Position]) -> ModelPosition:
    """Return a bounding box covering ``position`` and every target."""
    xs = [p.x for p in targets]
    ys = [p.y for p in targets]
    if not position.empty:
        xs += [position.offset.x, position.offset.x + position.dimensions.width - 1]
        ys += [position.offset.y, position.offset.y + position.dimensions.height - 1]
    min_x, max_x = min(xs) - GROWTH_MARGIN, max(xs) + GROWTH_MARGIN
    min_y, max_y = min(ys) - GROWTH_MARGIN, max(ys) + GROWTH_MARGIN
    return ModelPosition(
        offset=Position(min_x, min_y),
        dimensions=Dimensions(max_x - min_x + 1, max_y - min_y + 1),
    )


def _rekey(store: GridStore, position: ModelPosition) -> GridStore:
    elements = pmap({position.key(e.position): e for e in store.elements.values()})
    return GridStore(position=position, elements=elements)


def ensure_covers(store: GridStore, positions: Iterable[Position]) -> GridStore:
    """Grow the bounding box (re-encoding keys) so it covers ``positions``."""
    outside = [p for p in positions if not store.position.covers(p)]
    if not outside:
        return store
    return _rekey(store, _grow(store.position, outside))


def apply_change(store: GridStore, change: Change) -> GridStore:
    """Apply a single model change and return the new snapshot.

    Raises:
        ValueError: If ``change.action`` is not a :class:`ModelAction`.
    """
    if change.action == ModelAction.CLEAR_ALL:
        return GridStore()

    absolute = [e.offset(change.origin) for e in change.elements]

    if change.action == ModelAction.SET:
        store = ensure_covers(store, [e.position for e in absolute])
        evolver = store.elements.evolver()
        for element in absolute:
            evolver[store.position.key(element.position)] = element
        return replace(store, elements=evolver.persistent())

    if change.action == ModelAction.CLEAR:
        keys = {
            store.position.key(e.position)
            for e in absolute
            if store.position.covers(e.position)
        }
        evolver = store.elements.evolver()
        for key in keys.intersection(store.elements.keys()):
            evolver.remove(key)
        return replace(store, elements=evolver.persistent())

    raise ValueError(f"Unknown model action: {change.action!r}")


def apply_changes(store: GridStore, changes: Iterable[Change]) -> GridStore:
    """Apply ``changes`` in order; later writes to a coordinate win."""
    for change in changes:
        store = apply_change(store, change)
    return store


def shift_store(store: GridStore, offset: Position) -> GridStore:
    """Translate every element (and the bounding box) by ``offset``."""
    if store.position.empty:
        return store
    position = replace(store.position, offset=store.position.offset + offset)
    elements = store.elements.transform(
        [ny], lambda element: element.offset(offset)
    )
    return GridStore(position=position, elements=elements)


def elements_in_frame(store: GridStore, frame: Frame) -> List[Element]:
    """Return elements inside ``frame``, translated to frame-relative coordinates."""
    shift = ORIGIN - frame.origin
    return [
        element.offset(shift)
        for element in store.elements.values()
        if frame.contains(element.position)
    ]


class GridModel:
    """Mutable owner of the current :class:`GridStore` snapshot."""

    def __init__(self, store: Optional[GridStore] = None):
        self._store = store or GridStore()

    @property
    def store(self) -> GridStore:
        return self._store

    def __len__(self) -> int:
        return len(self._store.elements)

    def apply_changes(self, changes: Iterable[Change]) -> None:
        self._store = apply_changes(self._store, changes)

    def get_elements(
        self, frame: Frame, extra_changes: Iterable[Change] = ()
    ) -> List[Element]:
        """Return elements in ``frame`` as if ``extra_changes`` were applied.

        The committed state is left untouched.
        """
        return elements_in_frame(apply_changes(self._store, extra_changes), frame)

    def get_element(self, position: Position) -> Optional[Element]:
        """Return the element at absolute ``position`` or ``None``."""
        if not self._store.position.covers(position):
            return None
        return self._store.elements.get(self._store.position.key(position))

    def get_position(self) -> ModelPosition:
        return self._store.position

    def shift_elements(self, offset: Position) -> None:
        """Permanently translate every stored element by ``offset``."""
        self._store = shift_store(self._store, offset)

"""Flood fill.

4-connected, stack based fill over frame-relative elements. Flood fill is
confluent, so the filled *set* does not depend on push/pop order, but the
order of the returned list does; callers must not rely on it.
"""

from typing import Dict, Iterable, List

from pixel_grid.frame import Dimensions, Position
from pixel_grid.types import Color, Element
from pixel_grid.utils.encoder import encode

NEIGHBOR_OFFSETS = (Position(1, 0), Position(-1, 0), Position(0, 1), Position(0, -1))


def fill_area(
    elements: Iterable[Element], fill_element: Element, dimensions: Dimensions
) -> List[Element]:
    """Return the elements painted by filling at ``fill_element``'s position.

    Arguments:
        elements: Current elements, frame-relative.
        fill_element: Seed location carrying the new color (and extra data).
        dimensions: Bounds of the fill, ``[0, width) x [0, height)``.

    Returns:
        List[Element]: One element per filled cell, each a copy of
        ``fill_element`` at that cell.
    """
    existing: Dict[int, Color] = {
        encode(e.position, dimensions): e.color
        for e in elements
        if 0 <= e.x < dimensions.width and 0 <= e.y < dimensions.height
    }

    seed = fill_element.position
    replaced = existing.get(encode(seed, dimensions))

    filled: Dict[int, Element] = {}
    stack = [seed]
    while stack:
        pos = stack.pop()
        if not (0 <= pos.x < dimensions.width and 0 <= pos.y < dimensions.height):
            continue
        key = encode(pos, dimensions)
        if key in filled or existing.get(key) != replaced:
            continue
        filled[key] = fill_element.at(pos)
        stack.extend(pos + offset for offset in NEIGHBOR_OFFSETS)

    return list(filled.values())

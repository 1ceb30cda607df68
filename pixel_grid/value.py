"""Observable values.

A :class:`Value` holds one piece of editor state (the current element, the
configured dimensions, the zoom flag, ...) and notifies the handlers that were
registered on it. Components receive the values they depend on explicitly
instead of listening on a shared bus.

An optional validator sanitizes incoming values; when it returns ``None`` the
update is rejected and the previous value is kept.
"""

import logging
import math
from dataclasses import replace
from typing import Callable, Generic, List, Optional, TypeVar

from pixel_grid.frame import Dimensions
from pixel_grid.types import Element
from pixel_grid.utils.color import sanitize

T = TypeVar("T")

Validator = Callable[[object], Optional[T]]
ChangeHandler = Callable[[T], None]

logger = logging.getLogger(__name__)


class Value(Generic[T]):
    def __init__(self, initial: T, validator: Optional[Validator[T]] = None):
        self._validator = validator
        self._handlers: List[ChangeHandler[T]] = []
        validated = self._validate(initial)
        if validated is None:
            raise ValueError(f"Invalid initial value: {initial!r}")
        self._value: T = validated

    def _validate(self, value: object) -> Optional[T]:
        if self._validator is None:
            return value  # type: ignore[return-value]
        return self._validator(value)

    def get_value(self) -> T:
        return self._value

    def set_value(self, value: object) -> bool:
        """Validate and store ``value``, then notify handlers.

        Returns:
            bool: False if the validator rejected the value.
        """
        validated = self._validate(value)
        if validated is None:
            logger.warning("Rejected value %r, keeping %r", value, self._value)
            return False
        self._value = validated
        for handler in list(self._handlers):
            handler(validated)
        return True

    def add_value_change_handler(self, handler: ChangeHandler[T]) -> None:
        self._handlers.append(handler)

    def remove_value_change_handler(self, handler: ChangeHandler[T]) -> None:
        self._handlers.remove(handler)


# --- Validators ---


def boolean_validator(value: object) -> Optional[bool]:
    return bool(value)


def element_validator(value: object) -> Optional[Element]:
    """Accept an :class:`Element` or its dict form.

    The color must be a valid color or ``None`` (no color).
    """
    if isinstance(value, Element):
        candidate = value
    elif isinstance(value, dict):
        try:
            candidate = Element.from_dict(value)
        except (TypeError, ValueError):
            return None
    else:
        return None
    color = candidate.color
    if color is not None:
        color = sanitize(color)
        if color is None:
            return None
    return replace(candidate, x=0, y=0, color=color)


def dimensions_validator(value: object) -> Optional[Dimensions]:
    """Accept :class:`Dimensions` or a ``{"width", "height"}`` dict of positive ints."""
    if isinstance(value, Dimensions):
        candidate = value
    elif isinstance(value, dict):
        width, height = value.get("width"), value.get("height")
        if not all(
            isinstance(n, (int, float))
            and not isinstance(n, bool)
            and math.isfinite(n)
            for n in (width, height)
        ):
            return None
        candidate = Dimensions(int(width), int(height))  # type: ignore[arg-type]
    else:
        return None
    if candidate.width <= 0 or candidate.height <= 0:
        return None
    return candidate

"""Document converters for import/export.

The builder exchanges documents in a *common model format*::

    {
        "defaultElement": {"color": "#FFFFFF"},
        "currentElement": {"color": "#000000"},
        "dimensions": {"width": 16, "height": 16},
        "elements": [{"x": 0, "y": 0, "color": "#FF0000"}, ...],
    }

A converter maps that shape to and from an external storage schema. The
identity converter is the default.
"""

from typing import Any, Dict, Optional, Protocol

Document = Dict[str, Any]


class Converter(Protocol):
    def to_common_model_format(self, document: Any) -> Optional[Document]: ...

    def from_common_model_format(self, document: Document) -> Any: ...


class IdentityConverter:
    """Pass documents through unchanged; non-dict input is rejected."""

    def to_common_model_format(self, document: Any) -> Optional[Document]:
        if not isinstance(document, dict):
            return None
        return document

    def from_common_model_format(self, document: Document) -> Any:
        return document

"""Matte document model, schema migrations and config-file IO.

Keep this package free of Qt and layout imports: the layout package depends on
``model.BoxId``.
"""

from .migrations import CURRENT_VERSION, migrate_settings
from .model import BoxId, ConfigFormatError, CropRect, Document, Position, RegionMetrics

__all__ = [
    "CURRENT_VERSION",
    "BoxId",
    "ConfigFormatError",
    "CropRect",
    "Document",
    "Position",
    "RegionMetrics",
    "migrate_settings",
]

"""
Scan Module

Pure state machine for the scan screen: live detection, freezing a
snapshot and dragging boxes before running a comparison.
"""

from .state import (
    ScanState,
    EditableObject,
    FrameAnalyzed,
    Freeze,
    Resume,
    DragStart,
    DragMove,
    DragEnd,
    reduce
)

__all__ = [
    'ScanState',
    'EditableObject',
    'FrameAnalyzed',
    'Freeze',
    'Resume',
    'DragStart',
    'DragMove',
    'DragEnd',
    'reduce'
]

from __future__ import annotations

from enum import Enum

"""Session status enum.

SessionStatus is the visible busy state around long-running import/export:
    IDLE -> BUSY -> (READY | FAILED), and READY -> BUSY again on save.
"""


class SessionStatus(Enum):
    """Lifecycle of an AnnotationSession.

    - IDLE: nothing loaded (initial state, or after reset)
    - BUSY: an import or export is in flight
    - READY: a workbook is loaded and editable
    - FAILED: the last import/export failed; error holds the message
    """
    IDLE = "idle"
    BUSY = "busy"
    READY = "ready"
    FAILED = "failed"


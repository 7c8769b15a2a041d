"""Editor module - scene state, undo/redo and pointer interaction."""

from mdcanvas.editor.history import EditHistory
from mdcanvas.editor.interaction import DragMode, DragSession, InteractionController, ResizeHandle
from mdcanvas.editor.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from mdcanvas.editor.state import EditorState

__all__ = [
    "EditHistory",
    "EditorState",
    "InteractionController",
    "DragMode",
    "DragSession",
    "ResizeHandle",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
]

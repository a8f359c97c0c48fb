"""Service modules"""
from .lending_info import show_all_lending, show_lending_info
from .monitor import Monitor, MonitorState
from .watcher import PositionWatcher

__all__ = [
    "Monitor",
    "MonitorState",
    "PositionWatcher",
    "show_all_lending",
    "show_lending_info",
]

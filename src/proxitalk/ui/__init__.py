"""
ProxiTalk UI Module

PyQt5 monitor window with a live proximity graph.
"""
from .graph_widget import ProximityGraph
from .monitor_window import MonitorWindow

__all__ = [
    'ProximityGraph',
    'MonitorWindow',
]

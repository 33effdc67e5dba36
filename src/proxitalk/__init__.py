"""
ProxiTalk - close-pass gestures from a proximity, light or motion sensor.

Sub-packages:
    sensing   sensor discovery, sample log, gesture detection, worker
    feedback  vibration and spoken confirmation
    ui        monitor window and live graph
"""
__version__ = "0.1.0"

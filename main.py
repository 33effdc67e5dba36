"""
ProxiTalk - Close-pass gesture detection from a proximity sensor

Entry point for the application.
"""
import argparse
import logging
import sys
import time
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="ProxiTalk - wave over the sensor to hear your notifications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--backend",
        choices=["auto", "iio", "evdev", "simulated"],
        default=None,
        help="Sensor backend (overrides config)",
    )

    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window, print readings and gestures to the console",
    )

    parser.add_argument(
        "--no-speech",
        action="store_true",
        help="Disable spoken announcements",
    )

    parser.add_argument(
        "--no-vibrate",
        action="store_true",
        help="Disable the rumble pulse",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def run_headless(config, session, feedback):
    """
    Run monitoring in the foreground - prints near/far changes and gestures.
    Useful for checking a sensor without a display.
    """
    from proxitalk.sensing import NoSensorAvailable

    print("Starting headless monitoring...")
    print("Press Ctrl+C to quit")
    print("-" * 40)

    try:
        session.start()
    except NoSensorAvailable as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Sensor: {session.selector.describe()} (max {session.selector.max_range():.1f})")

    interval = 1.0 / max(1, config.sensor.poll_hz)
    last_near = None

    try:
        while True:
            loop_start = time.perf_counter()

            event = session.poll()

            reading = session.log.last()
            if reading is not None and reading.is_near != last_near:
                last_near = reading.is_near
                state = "NEAR" if reading.is_near else "FAR"
                print(f"[{session.log.count():4d}] {state:4s} distance={reading.distance:.2f}")

            if event is not None:
                print(f"Gesture detected! ({event.event_count} passes)")
                feedback.on_gesture(event)

            sleep_time = interval - (time.perf_counter() - loop_start)
            if sleep_time > 0:
                time.sleep(sleep_time)

    except KeyboardInterrupt:
        print("\nStopping...")
    finally:
        session.stop()

    return 0


def run_gui_mode(config, session, feedback):
    """Run ProxiTalk with the monitor window (Multithreaded)."""
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication
    from PyQt5.QtCore import QThread, Qt
    from proxitalk.sensing.worker import MonitorWorker
    from proxitalk.ui import MonitorWindow

    app = QApplication(sys.argv)

    window = MonitorWindow(
        session.log,
        refresh_ms=config.ui.refresh_ms,
        graph_points=config.ui.graph_points,
    )
    window.show()

    # Setup background worker and thread
    thread = QThread()
    worker = MonitorWorker(session, poll_hz=config.sensor.poll_hz)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure the sensor is released on exit."""
        print("\nCleaning up sensor resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_started(modality):
        window.on_started(modality, session.selector.describe(), session.selector.max_range())

    def handle_gesture(event):
        """Gesture from the worker: flash the window, then vibrate and speak."""
        window.show_gesture(event)
        feedback.on_gesture(event)

    # Connect signals (Use QueuedConnection to ensure UI updates happen in main thread)
    window.start_requested.connect(worker.start_process)
    window.stop_requested.connect(worker.stop_process, Qt.DirectConnection)
    worker.started.connect(handle_started, Qt.QueuedConnection)
    worker.stopped.connect(window.on_stopped, Qt.QueuedConnection)
    worker.gesture_detected.connect(handle_gesture, Qt.QueuedConnection)
    worker.error.connect(window.on_error, Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from proxitalk.sensing import load_config, create_backend, MonitoringSession
    from proxitalk.feedback import build_feedback

    config = load_config(args.config)

    # Apply CLI overrides
    if args.backend:
        config.sensor.backend = args.backend
    if args.no_speech:
        config.feedback.speak = False
    if args.no_vibrate:
        config.feedback.vibrate = False

    print("ProxiTalk starting...")
    print(f"  Backend: {config.sensor.backend}")
    print(f"  Gesture: {config.gestures.required_events} passes in {config.gestures.window_ms} ms")
    print(f"  Debug: {args.debug}")
    print()

    session = MonitoringSession(create_backend(config.sensor), config)
    session.selector.log_availability()
    feedback = build_feedback(config.feedback)

    try:
        if args.headless:
            return run_headless(config, session, feedback)
        return run_gui_mode(config, session, feedback)
    finally:
        feedback.close()


if __name__ == "__main__":
    sys.exit(main())

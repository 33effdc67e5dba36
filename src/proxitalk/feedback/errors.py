class ActuatorError(RuntimeError):
    """A haptic or speech actuator could not run."""

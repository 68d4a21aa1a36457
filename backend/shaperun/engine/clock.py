import time


def wall_clock_ms() -> float:
    return time.time() * 1000.0


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = float(start_ms)

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> float:
        self.now_ms += ms
        return self.now_ms

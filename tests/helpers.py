class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SequenceRandom:
    """Replays a fixed list of picks (each taken modulo n)."""
    def __init__(self, picks):
        self.picks = list(picks)
        self.calls = []

    def pick(self, n: int) -> int:
        self.calls.append(n)
        value = self.picks.pop(0) if self.picks else 0
        return value % n

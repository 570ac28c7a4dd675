"""Test doubles for the collaborators the engine consumes."""


class FakePlaybackSource:
    """Scriptable stand-in for a player: tests move ``current_time`` by hand."""

    def __init__(self, current_time: float = 0.0):
        self.current_time = current_time
        self.buffered_end: float | None = None
        self.seeks: list[float] = []

    def seek(self, position: float) -> None:
        self.seeks.append(position)
        self.current_time = position


class FailingKeyValueStore:
    """Key-value store whose every call raises, as an unavailable backend would."""

    def __init__(self):
        self.get_calls = 0
        self.set_calls = 0

    def get(self, key: str):
        self.get_calls += 1
        raise OSError('storage unavailable')

    def set(self, key: str, value: str):
        self.set_calls += 1
        raise OSError('storage unavailable')

import threading

from app.utils.concurrency import KeyedLock, synchronized


class Counter:
    def __init__(self, locked: bool = True) -> None:
        if locked:
            self._lock = threading.Lock()
        self.value = 0

    @synchronized
    def bump(self) -> int:
        current = self.value
        self.value = current + 1
        return self.value


def test_synchronized_serializes_increments():
    counter = Counter()
    threads = [threading.Thread(target=lambda: [counter.bump() for _ in range(500)]) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert counter.value == 4000


def test_synchronized_without_lock_still_runs():
    counter = Counter(locked=False)
    assert counter.bump() == 1


def test_keyed_lock_reuses_lock_per_key():
    locks = KeyedLock()
    assert locks.get(1) is locks.get(1)
    assert locks.get(1) is not locks.get(2)
    assert len(locks) == 2


def test_keyed_lock_is_reentrant():
    locks = KeyedLock()
    with locks.hold("a"):
        with locks.hold("a"):
            pass


def test_keyed_lock_does_not_block_other_keys():
    locks = KeyedLock()
    acquired = threading.Event()

    def other():
        with locks.hold("b"):
            acquired.set()

    with locks.hold("a"):
        worker = threading.Thread(target=other)
        worker.start()
        assert acquired.wait(timeout=2)
        worker.join()

import threading
import time

from broker import create_app
from broker.services.registry import GameRegistry
from broker.services.sweeper import Sweeper


def test_sweep_once_evicts_expired(registry, clock):
    registry.create_game()
    registry.create_game()
    clock.advance(700)
    sweeper = Sweeper(registry, interval=60)
    assert sweeper.sweep_once() == 2
    assert len(registry) == 0


def test_sweep_once_survives_registry_errors(registry):
    def broken(now=None):
        raise RuntimeError('boom')

    registry.purge_expired = broken
    sweeper = Sweeper(registry, interval=60)
    assert sweeper.sweep_once() == 0


def test_background_thread_sweeps_and_stops():
    registry = GameRegistry(expiry_window=0.05)
    for _ in range(5):
        registry.create_game()
    sweeper = Sweeper(registry, interval=0.02)
    sweeper.start()
    try:
        deadline = time.time() + 3.0
        while time.time() < deadline and len(registry) > 0:
            time.sleep(0.02)
    finally:
        sweeper.stop()
    assert len(registry) == 0
    assert not sweeper.running


def test_stop_does_not_wait_for_full_interval():
    sweeper = Sweeper(GameRegistry(), interval=3600)
    sweeper.start()
    assert sweeper.running
    started = time.time()
    sweeper.stop()
    assert time.time() - started < 2.0
    assert not sweeper.running


def test_sweeper_not_started_in_tests(flask_app):
    assert not flask_app.extensions['game_sweeper'].running


def test_sweeper_can_be_enabled_in_tests():
    class SweepingConfig:
        TESTING = True
        ENABLE_SWEEPER_IN_TESTS = True
        CLEANUP_INTERVAL_SEC = 3600

    application = create_app(SweepingConfig)
    sweeper = application.extensions['game_sweeper']
    try:
        assert sweeper.running
    finally:
        sweeper.stop()


def test_stop_keeps_thread_that_is_still_sweeping():
    registry = GameRegistry()
    entered = threading.Event()
    release = threading.Event()

    def slow_purge(now=None):
        entered.set()
        release.wait(5)
        return 0

    registry.purge_expired = slow_purge
    sweeper = Sweeper(registry, interval=0.01)
    sweeper.start()
    assert entered.wait(2)

    sweeper.stop(timeout=0.05)
    assert sweeper.running
    first = sweeper._thread

    release.set()
    sweeper.start()
    assert sweeper.running
    assert sweeper._thread is not first
    assert not first.is_alive()
    sweeper.stop()
    assert not sweeper.running

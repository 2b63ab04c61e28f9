"""
Tests for the realtime FPS meter.
"""

from pipeline.fps import FpsMeter


def test_window_closes_after_one_second():
    meter = FpsMeter(clock=lambda: 0.0)
    meter.reset(0.0)

    samples = [meter.tick(i / 30) for i in range(1, 31)]

    assert samples[:-1] == [None] * 29
    assert samples[-1] == 30
    assert meter.fps == 30


def test_rounds_to_nearest():
    meter = FpsMeter(clock=lambda: 0.0)
    meter.reset(0.0)

    for _ in range(24):
        meter.tick(0.5)
    # 25 passes over 1.2 s
    assert meter.tick(1.2) == 21


def test_windows_do_not_overlap():
    meter = FpsMeter(clock=lambda: 0.0)
    meter.reset(0.0)

    meter.tick(1.0)
    assert meter.fps == 1

    # the next window starts at 1.0
    meter.tick(1.5)
    assert meter.tick(2.0) == 2


def test_fps_holds_until_next_window():
    meter = FpsMeter(clock=lambda: 0.0)
    meter.reset(0.0)
    for i in range(1, 11):
        meter.tick(i / 10)
    assert meter.fps == 10

    assert meter.tick(1.2) is None
    assert meter.fps == 10


def test_reset_uses_clock():
    now = [5.0]
    meter = FpsMeter(clock=lambda: now[0])
    meter.reset()

    now[0] = 6.0
    assert meter.tick() == 1

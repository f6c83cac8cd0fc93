import random

from crossover import CrossoverDetector, crossover, crossunder


def test_crossover_requires_previous_at_or_below():
    assert crossover(2, 1, 1, 1)          # touched, then above
    assert crossover(2, 1, 0, 1)
    assert not crossover(2, 1, 2, 1)      # already above
    assert not crossover(1, 1, 0, 1)      # equal is not above


def test_crossunder_requires_previous_at_or_above():
    assert crossunder(0, 1, 1, 1)
    assert crossunder(0, 1, 2, 1)
    assert not crossunder(0, 1, 0, 1)
    assert not crossunder(1, 1, 2, 1)


def test_cross_is_exclusive_and_symmetric():
    rng = random.Random(7)
    samples = [(rng.choice([0, 1, 2]), rng.choice([0, 1, 2])) for _ in range(200)]
    for (prev_a, prev_b), (a, b) in zip(samples, samples[1:]):
        up = crossover(a, b, prev_a, prev_b)
        down = crossunder(a, b, prev_a, prev_b)
        assert not (up and down)
        assert up == crossunder(b, a, prev_b, prev_a)
        assert down == crossover(b, a, prev_b, prev_a)


def test_detector_reports_nothing_on_first_bar():
    detector = CrossoverDetector()
    event = detector.update(5, 1)
    assert not event.any_cross
    assert event.previous_a is None


def test_detector_tracks_previous_sample():
    detector = CrossoverDetector()
    events = [detector.update(a, 10) for a in [8, 9, 11, 12, 9]]
    assert [e.crossover for e in events] == [False, False, True, False, False]
    assert [e.crossunder for e in events] == [False, False, False, False, True]
    assert events[-1].previous_a == 12


def test_detector_preview_does_not_advance():
    detector = CrossoverDetector()
    detector.update(8, 10)
    assert detector.update(11, 10, commit=False).crossover
    assert detector.update(12, 10, commit=False).crossover
    assert detector.update(11, 10).crossover
    assert not detector.update(12, 10).crossover

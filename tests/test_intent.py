from flappy_pushup.intent import MovementIntentDetector


def test_small_moves_do_not_fire():
    detector = MovementIntentDetector()
    assert not any(detector.update(0.5 + i * 0.01) for i in range(5))


def test_large_move_fires_then_cools_down():
    detector = MovementIntentDetector()
    assert detector.update(0.8) is True
    fired = [detector.update(0.0 if i % 2 else 1.0) for i in range(30)]
    assert not any(fired)
    assert detector.cooldown == 0
    assert detector.update(0.0) is True


def test_last_value_tracks_every_evaluated_tick():
    detector = MovementIntentDetector(cooldown_ticks=0)
    detector.update(0.52)
    detector.update(0.54)
    detector.update(0.56)
    assert detector.last_value == 0.56
    # each step is under the threshold even though the total drift is not
    assert detector.update(0.58) is False


def test_threshold_is_strict():
    detector = MovementIntentDetector(threshold=0.25, last_value=0.5)
    assert detector.update(0.75) is False
    assert detector.update(1.0001) is True

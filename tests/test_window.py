from src.scheduler.window import (
    MINUTES_PER_DAY, is_within_normalized_window, normalize_for_window, time_string_to_minutes,
)


def minutes(clock):
    return time_string_to_minutes(clock)


class TestTimeStringToMinutes:
    def test_parses_hours_and_minutes(self):
        assert time_string_to_minutes("09:30") == 570
        assert time_string_to_minutes("00:00") == 0
        assert time_string_to_minutes("23:59") == 1439

    def test_malformed_input_maps_to_midnight(self):
        assert time_string_to_minutes("") == 0
        assert time_string_to_minutes(None) == 0
        assert time_string_to_minutes("nine") == 0
        assert time_string_to_minutes("ab:cd") == 0

    def test_bad_minutes_keep_the_hour(self):
        assert time_string_to_minutes("7:xx") == 420


class TestOvernightWindow:
    """22:00-06:00 crosses midnight"""

    def test_late_evening_slot_is_inside(self):
        assert is_within_normalized_window(minutes("23:00"), minutes("23:30"), minutes("22:00"), minutes("06:00"))

    def test_midday_slot_is_outside(self):
        assert not is_within_normalized_window(minutes("10:00"), minutes("10:30"), minutes("22:00"), minutes("06:00"))

    def test_early_morning_slot_ending_at_window_end(self):
        assert is_within_normalized_window(minutes("05:00"), minutes("06:00"), minutes("22:00"), minutes("06:00"))

    def test_slot_spanning_midnight(self):
        assert is_within_normalized_window(minutes("23:30"), minutes("00:30"), minutes("22:00"), minutes("06:00"))

    def test_slot_running_past_window_end(self):
        assert not is_within_normalized_window(minutes("05:30"), minutes("06:30"), minutes("22:00"), minutes("06:00"))

    def test_normalized_timeline(self):
        assert normalize_for_window(1380, 1410, 1320, 360) == (1380, 1410, 1320, 360 + MINUTES_PER_DAY)
        assert normalize_for_window(300, 360, 1320, 360) == (1740, 1800, 1320, 1800)


class TestDaytimeWindow:
    def test_slot_ending_exactly_at_close(self):
        assert is_within_normalized_window(minutes("16:00"), minutes("17:00"), minutes("09:00"), minutes("17:00"))

    def test_slot_running_past_close(self):
        assert not is_within_normalized_window(minutes("16:30"), minutes("17:30"), minutes("09:00"), minutes("17:00"))

    def test_slot_starting_before_open(self):
        assert not is_within_normalized_window(minutes("08:30"), minutes("09:30"), minutes("09:00"), minutes("17:00"))

    def test_slot_crossing_midnight_never_fits_a_day_window(self):
        assert not is_within_normalized_window(minutes("23:30"), minutes("00:30"), minutes("09:00"), minutes("17:00"))

    def test_window_reaching_midnight(self):
        assert is_within_normalized_window(minutes("23:30"), minutes("00:00"), minutes("08:00"), MINUTES_PER_DAY)


def test_every_half_hour_pair_has_an_answer():
    for start in range(0, MINUTES_PER_DAY, 30):
        for window_start, window_end in ((540, 1020), (1320, 360), (0, MINUTES_PER_DAY)):
            result = is_within_normalized_window(start, (start + 60) % MINUTES_PER_DAY, window_start, window_end)
            assert isinstance(result, bool)

import unittest

from pomodoro.phases import next_session_number, phase_for_session


class PhaseRuleTests(unittest.TestCase):
    def test_even_counters_are_work(self) -> None:
        for session_number in (0, 2, 4, 6, 8, 14, 100):
            with self.subTest(session_number=session_number):
                self.assertEqual("Work", phase_for_session(session_number, 4))

    def test_default_interval_cycle(self) -> None:
        phases = [phase_for_session(n, 4) for n in range(1, 9)]
        self.assertEqual(
            [
                "ShortBreak",
                "Work",
                "ShortBreak",
                "Work",
                "ShortBreak",
                "Work",
                "LongBreak",
                "Work",
            ],
            phases,
        )

    def test_long_break_repeats_on_multiples_of_cycle_length(self) -> None:
        # 2 * 4 - 1 == 7: odd multiples of 7 are long breaks.
        self.assertEqual("LongBreak", phase_for_session(21, 4))
        self.assertEqual("ShortBreak", phase_for_session(9, 4))
        self.assertEqual("Work", phase_for_session(14, 4))

    def test_interval_of_one_makes_every_break_long(self) -> None:
        for session_number in (1, 3, 5):
            with self.subTest(session_number=session_number):
                self.assertEqual("LongBreak", phase_for_session(session_number, 1))

    def test_interval_of_two(self) -> None:
        self.assertEqual("ShortBreak", phase_for_session(1, 2))
        self.assertEqual("LongBreak", phase_for_session(3, 2))
        self.assertEqual("ShortBreak", phase_for_session(5, 2))
        self.assertEqual("LongBreak", phase_for_session(9, 2))

    def test_negative_counter_maps_to_work(self) -> None:
        self.assertEqual("Work", phase_for_session(-1, 4))
        self.assertEqual("Work", phase_for_session(-2, 4))

    def test_next_session_number_is_inverse_along_one_step(self) -> None:
        advanced = next_session_number(5, is_previous=False)
        self.assertEqual(6, advanced)
        self.assertEqual(5, next_session_number(advanced, is_previous=True))


if __name__ == "__main__":
    unittest.main()

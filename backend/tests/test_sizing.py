import unittest

from tirepos.sizing import format_number, tire_size_display, wheel_size_display


class TireSizeDisplayTests(unittest.TestCase):
    def test_basic_tire_label(self):
        self.assertEqual(tire_size_display(205, 55, 16), "205/55R16")

    def test_load_index_and_speed_rating_suffix(self):
        self.assertEqual(tire_size_display(205, 55, 16, "91", "V"), "205/55R16 91V")

    def test_suffix_needs_both_parts(self):
        self.assertEqual(tire_size_display(205, 55, 16, "91", None), "205/55R16")
        self.assertEqual(tire_size_display(205, 55, 16, None, "V"), "205/55R16")
        self.assertEqual(tire_size_display(205, 55, 16, "", "V"), "205/55R16")

    def test_missing_dimension_gives_no_label(self):
        self.assertIsNone(tire_size_display(205, None, 16))
        self.assertIsNone(tire_size_display(None, 55, 16))


class WheelSizeDisplayTests(unittest.TestCase):
    def test_full_wheel_label(self):
        self.assertEqual(
            wheel_size_display(16, 7.0, "5x114.3", 5, "Long Stud"),
            "16x7 PCD:5x114.3 5 Stud (Long Stud)",
        )

    def test_fractional_width(self):
        self.assertEqual(wheel_size_display(17, 7.5), "17x7.5")

    def test_optional_segments_are_skipped(self):
        self.assertEqual(wheel_size_display(15, 6.5, None, 4, None), "15x6.5 4 Stud")
        self.assertEqual(wheel_size_display(15, 6.5, "4x100", None, "Short Stud"), "15x6.5 PCD:4x100 (Short Stud)")

    def test_missing_width_gives_no_label(self):
        self.assertIsNone(wheel_size_display(16, None))


class FormatNumberTests(unittest.TestCase):
    def test_whole_floats_drop_trailing_zero(self):
        self.assertEqual(format_number(7.0), "7")
        self.assertEqual(format_number(8.5), "8.5")
        self.assertEqual(format_number(16), "16")
        self.assertEqual(format_number(" ET35 "), "ET35")


if __name__ == "__main__":
    unittest.main()

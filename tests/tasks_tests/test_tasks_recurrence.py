"""Tests for tasks_assistant/recurrence.py."""

from __future__ import annotations

import datetime as dt
import unittest

from tasks_assistant.errors import DecodeError, ScheduleError, ValidationError
from tasks_assistant.recurrence import (
    DEFAULT_ANCHOR,
    Frequency,
    RecurrenceRule,
    Weekday,
    decode_frequency,
    decode_interval,
    decode_rule,
    decode_weekday,
)

UTC = dt.timezone.utc

MARCH_START = dt.datetime(2024, 3, 1, tzinfo=UTC)
MARCH_END = dt.datetime(2024, 3, 31, 23, 59, 59, 999999, tzinfo=UTC)


def _days(occurrences):
    return [o.day for o in occurrences]


class TestDecodeTokens(unittest.TestCase):
    """Tests for the token decoders."""

    def test_frequencies(self):
        self.assertIs(decode_frequency("daily"), Frequency.DAILY)
        self.assertIs(decode_frequency("weekly"), Frequency.WEEKLY)
        self.assertIs(decode_frequency("monthly"), Frequency.MONTHLY)

    def test_unknown_frequency_carries_token(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_frequency("fortnightly")
        self.assertEqual(str(ctx.exception), "Frequency 'fortnightly' is not understood.")
        self.assertEqual(ctx.exception.token, "fortnightly")

    def test_frequency_is_case_sensitive(self):
        with self.assertRaises(DecodeError):
            decode_frequency("Weekly")

    def test_weekdays(self):
        self.assertIs(decode_weekday("MO"), Weekday.MO)
        self.assertIs(decode_weekday("SU"), Weekday.SU)

    def test_unknown_weekday_carries_token(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_weekday("Mo")
        self.assertEqual(str(ctx.exception), "Week day 'Mo' is not understood.")
        self.assertEqual(ctx.exception.token, "Mo")

    def test_non_string_weekday(self):
        with self.assertRaises(DecodeError):
            decode_weekday(1)

    def test_interval_defaults_to_one(self):
        self.assertEqual(decode_interval(None), 1)
        self.assertEqual(decode_interval(3), 3)

    def test_interval_rejects_bad_values(self):
        for bad in (0, -1, "2", 1.5, True):
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError):
                    decode_interval(bad)

    def test_decode_rule_defaults(self):
        rule = decode_rule("weekly")
        self.assertEqual(rule.interval, 1)
        self.assertEqual(rule.weekdays, frozenset())
        self.assertEqual(rule.anchor, DEFAULT_ANCHOR)

    def test_decode_rule_weekdays_must_be_list(self):
        with self.assertRaises(ValidationError):
            decode_rule("weekly", 1, "SU")

    def test_decode_rule_rejects_bad_weekday_in_list(self):
        with self.assertRaises(DecodeError):
            decode_rule("weekly", 1, ["SU", "XX"])

    def test_errors_are_value_errors_with_config_exit_code(self):
        self.assertTrue(issubclass(ScheduleError, ValueError))
        self.assertEqual(DecodeError("x").exit_code, 3)


class TestRuleConstruction(unittest.TestCase):
    """Tests for RecurrenceRule validation."""

    def test_default_anchor_is_a_tuesday(self):
        self.assertEqual(DEFAULT_ANCHOR.weekday(), Weekday.TU)
        self.assertEqual(DEFAULT_ANCHOR, dt.datetime(2000, 2, 1, tzinfo=UTC))

    def test_zero_interval_rejected(self):
        with self.assertRaises(ValidationError):
            RecurrenceRule(Frequency.WEEKLY, interval=0)

    def test_naive_anchor_rejected(self):
        with self.assertRaises(ValidationError):
            RecurrenceRule(Frequency.DAILY, anchor=dt.datetime(2000, 2, 1))

    def test_anchor_normalized_to_utc(self):
        plus2 = dt.timezone(dt.timedelta(hours=2))
        rule = RecurrenceRule(Frequency.DAILY, anchor=dt.datetime(2000, 2, 1, 2, 0, tzinfo=plus2))
        self.assertEqual(rule.anchor, DEFAULT_ANCHOR)
        self.assertEqual(rule.anchor.utcoffset(), dt.timedelta(0))

    def test_string_frequency_coerced(self):
        rule = RecurrenceRule("monthly")
        self.assertIs(rule.frequency, Frequency.MONTHLY)

    def test_effective_weekdays_fall_back_to_anchor(self):
        self.assertEqual(RecurrenceRule(Frequency.WEEKLY).effective_weekdays, frozenset({Weekday.TU}))
        rule = RecurrenceRule(Frequency.WEEKLY, weekdays=frozenset({Weekday.SU}))
        self.assertEqual(rule.effective_weekdays, frozenset({Weekday.SU}))


class TestWeekly(unittest.TestCase):
    """Weekly expansion."""

    def test_every_sunday_in_march_2024(self):
        rule = decode_rule("weekly", 1, ["SU"])
        occ = rule.between(MARCH_START, MARCH_END)
        self.assertEqual(_days(occ), [3, 10, 17, 24, 31])
        for o in occ:
            self.assertEqual((o.hour, o.minute, o.second, o.microsecond), (0, 0, 0, 0))
            self.assertEqual(o.tzinfo, UTC)

    def test_interval_two_is_fourteen_days_apart(self):
        rule = decode_rule("weekly", 2, ["SU"])
        occ = rule.between(MARCH_START, MARCH_END)
        self.assertEqual(_days(occ), [3, 17, 31])
        for a, b in zip(occ, occ[1:]):
            self.assertEqual(b - a, dt.timedelta(days=14))

    def test_interval_two_phase_continues_across_windows(self):
        rule = decode_rule("weekly", 2, ["SU"])
        april = rule.between(dt.date(2024, 4, 1), dt.date(2024, 4, 30))
        self.assertEqual(_days(april), [14, 28])

    def test_no_weekdays_uses_anchor_weekday(self):
        rule = decode_rule("weekly")
        occ = rule.between(MARCH_START, MARCH_END)
        self.assertEqual(_days(occ), [5, 12, 19, 26])
        self.assertTrue(all(o.weekday() == Weekday.TU for o in occ))

    def test_several_weekdays_are_chronological(self):
        rule = decode_rule("weekly", 1, ["SU", "MO"])
        occ = rule.between(dt.date(2024, 3, 1), dt.date(2024, 3, 11))
        self.assertEqual(_days(occ), [3, 4, 10, 11])

    def test_window_starting_mid_week(self):
        rule = decode_rule("weekly", 1, ["MO", "FR"])
        occ = rule.between(dt.date(2024, 3, 6), dt.date(2024, 3, 12))
        self.assertEqual(_days(occ), [8, 11])


class TestDaily(unittest.TestCase):
    """Daily expansion."""

    def test_every_day(self):
        occ = decode_rule("daily").between(MARCH_START, MARCH_END)
        self.assertEqual(len(occ), 31)
        self.assertEqual(occ[0], MARCH_START)

    def test_interval_keeps_anchor_phase(self):
        occ = decode_rule("daily", 3).between(MARCH_START, MARCH_END)
        self.assertEqual(_days(occ), [2, 5, 8, 11, 14, 17, 20, 23, 26, 29])

    def test_weekdays_filter_daily_rule(self):
        occ = decode_rule("daily", 1, ["MO"]).between(MARCH_START, MARCH_END)
        self.assertEqual(_days(occ), [4, 11, 18, 25])


class TestMonthly(unittest.TestCase):
    """Monthly expansion."""

    def test_default_anchor_fires_on_the_first(self):
        occ = decode_rule("monthly").between(dt.date(2024, 1, 1), dt.date(2024, 12, 31))
        self.assertEqual([o.month for o in occ], list(range(1, 13)))
        self.assertTrue(all(o.day == 1 for o in occ))

    def test_interval_two_aligned_to_anchor_month(self):
        occ = decode_rule("monthly", 2).between(dt.date(2024, 1, 1), dt.date(2024, 12, 31))
        self.assertEqual([o.month for o in occ], [2, 4, 6, 8, 10, 12])

    def test_day_31_skips_short_months(self):
        anchor = dt.datetime(2024, 1, 31, tzinfo=UTC)
        rule = decode_rule("monthly", anchor=anchor)
        occ = rule.between(dt.date(2024, 1, 1), dt.date(2024, 12, 31))
        self.assertEqual([o.month for o in occ], [1, 3, 5, 7, 8, 10, 12])
        self.assertTrue(all(o.day == 31 for o in occ))


class TestWindowEdges(unittest.TestCase):
    """Boundary behavior shared by all frequencies."""

    RULES = (
        decode_rule("daily"),
        decode_rule("weekly", 1, ["SU"]),
        decode_rule("monthly"),
    )

    def test_bounds_are_inclusive_by_default(self):
        sunday = dt.datetime(2024, 3, 3, tzinfo=UTC)
        rule = decode_rule("weekly", 1, ["SU"])
        self.assertEqual(rule.between(sunday, sunday), [sunday])

    def test_exclusive_mode_drops_boundaries(self):
        sunday = dt.datetime(2024, 3, 3, tzinfo=UTC)
        rule = decode_rule("weekly", 1, ["SU"])
        self.assertEqual(rule.between(sunday, sunday, inclusive=False), [])
        occ = rule.between(sunday, dt.datetime(2024, 3, 17, tzinfo=UTC), inclusive=False)
        self.assertEqual(_days(occ), [10])

    def test_inverted_window_is_empty(self):
        for rule in self.RULES:
            with self.subTest(rule=rule.frequency):
                self.assertEqual(rule.between(MARCH_END, MARCH_START), [])

    def test_window_before_anchor_is_empty(self):
        for rule in self.RULES:
            with self.subTest(rule=rule.frequency):
                self.assertEqual(rule.between(dt.date(1999, 1, 1), dt.date(1999, 12, 31)), [])

    def test_anchor_after_window_is_empty(self):
        late = dt.datetime(2030, 1, 1, tzinfo=UTC)
        self.assertEqual(decode_rule("daily", anchor=late).between(MARCH_START, MARCH_END), [])

    def test_last_month_of_the_calendar(self):
        start = dt.datetime(9999, 12, 1, tzinfo=UTC)
        end = dt.datetime.max.replace(tzinfo=UTC)
        expected = {
            Frequency.DAILY: 31,
            Frequency.WEEKLY: 4,  # Sundays 5, 12, 19, 26
            Frequency.MONTHLY: 1,
        }
        for rule in self.RULES:
            with self.subTest(rule=rule.frequency):
                occ = rule.between(start, end)
                self.assertEqual(len(occ), expected[rule.frequency])
                self.assertLessEqual(occ[-1], end)

    def test_wide_intervals_near_the_calendar_end(self):
        start = dt.datetime(9999, 12, 1, tzinfo=UTC)
        end = dt.datetime.max.replace(tzinfo=UTC)
        for rule in (decode_rule("daily", 7), decode_rule("weekly", 3, ["SA", "SU"]), decode_rule("monthly", 5)):
            with self.subTest(rule=rule.frequency):
                for occ in rule.between(start, end):
                    self.assertTrue(start <= occ <= end)

    def test_occurrences_never_precede_anchor(self):
        occ = decode_rule("daily").between(dt.date(2000, 1, 25), dt.date(2000, 2, 3))
        self.assertEqual(occ[0], DEFAULT_ANCHOR)
        self.assertEqual(len(occ), 3)

    def test_expansion_is_deterministic(self):
        for rule in self.RULES:
            with self.subTest(rule=rule.frequency):
                self.assertEqual(rule.between(MARCH_START, MARCH_END), rule.between(MARCH_START, MARCH_END))

    def test_aware_bounds_in_other_zones(self):
        plus2 = dt.timezone(dt.timedelta(hours=2))
        # 2024-03-03T01:00+02:00 is 2024-03-02T23:00Z, before Sunday midnight UTC
        start = dt.datetime(2024, 3, 3, 1, 0, tzinfo=plus2)
        end = dt.datetime(2024, 3, 3, 3, 0, tzinfo=plus2)
        occ = decode_rule("weekly", 1, ["SU"]).between(start, end)
        self.assertEqual(occ, [dt.datetime(2024, 3, 3, tzinfo=UTC)])

    def test_naive_bounds_read_as_utc(self):
        occ = decode_rule("weekly", 1, ["SU"]).between(dt.datetime(2024, 3, 3), dt.datetime(2024, 3, 3))
        self.assertEqual(occ, [dt.datetime(2024, 3, 3, tzinfo=UTC)])


class TestDescribe(unittest.TestCase):
    """Human-readable and RRULE renderings."""

    def test_describe(self):
        self.assertEqual(decode_rule("weekly", 1, ["SU"]).describe(), "every week on Sunday")
        self.assertEqual(decode_rule("weekly", 2, ["SU"]).describe(), "every 2 weeks on Sunday")
        self.assertEqual(decode_rule("weekly").describe(), "every week on Tuesday")
        self.assertEqual(decode_rule("daily").describe(), "every day")
        self.assertEqual(decode_rule("daily", 3, ["MO"]).describe(), "every 3 days on Monday")
        self.assertEqual(decode_rule("monthly").describe(), "every month on day 1")
        self.assertEqual(decode_rule("monthly", 2).describe(), "every 2 months on day 1")

    def test_describe_orders_days_monday_first(self):
        self.assertEqual(decode_rule("weekly", 1, ["SU", "MO"]).describe(), "every week on Monday, Sunday")

    def test_to_rrule(self):
        self.assertEqual(decode_rule("weekly", 1, ["SU", "MO"]).to_rrule(), "FREQ=WEEKLY;INTERVAL=1;BYDAY=MO,SU")
        self.assertEqual(decode_rule("monthly", 3).to_rrule(), "FREQ=MONTHLY;INTERVAL=3")
        self.assertEqual(decode_rule("daily").to_rrule(), "FREQ=DAILY;INTERVAL=1")


if __name__ == "__main__":
    unittest.main()

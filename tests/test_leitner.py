import unittest

from core import LogEntry, ScheduleState, initialize
from core.calendar import add_days
from core.errors import FormatError, NotFoundError, NothingToUndoError
from scheduler.leitner import LeitnerScheduler, Sections, Summary


def _levels(items):
    return [lv.level for lv in items]


class TestClassifyLevels(unittest.TestCase):
    """Tests for the actionable / pending / upcoming split."""

    def setUp(self):
        self.state = initialize("2024-01-01")

    def test_oldest_due_level_is_actionable(self):
        """Earlier due date should win regardless of level number."""
        self.state.get_level(1).next_due = "2024-01-03"
        self.state.get_level(2).next_due = "2024-01-01"

        sections = LeitnerScheduler.classify_levels(self.state, "2024-01-05")

        self.assertEqual(sections.actionable.level, 2)
        self.assertEqual(_levels(sections.pending), [1, 3])

    def test_backlog_scenario(self):
        """Levels due 01-01 and 01-03 seen on 01-05: level 1 first, level 2 pending."""
        for lv in self.state.levels:
            lv.next_due = "2024-02-01"
        self.state.get_level(1).next_due = "2024-01-01"
        self.state.get_level(2).next_due = "2024-01-03"

        sections = LeitnerScheduler.classify_levels(self.state, "2024-01-05")

        self.assertEqual(sections.actionable.level, 1)
        self.assertEqual(_levels(sections.pending), [2])
        self.assertEqual(_levels(sections.upcoming), [3, 4, 5, 6, 7])

    def test_ties_broken_by_level_number(self):
        self.state.get_level(5).next_due = "2024-01-01"

        sections = LeitnerScheduler.classify_levels(self.state, "2024-01-01")

        self.assertEqual(sections.actionable.level, 1)
        self.assertEqual(_levels(sections.pending), [5])

    def test_nothing_due(self):
        sections = LeitnerScheduler.classify_levels(self.state, "2023-12-31")

        self.assertIsNone(sections.actionable)
        self.assertEqual(sections.pending, [])
        self.assertEqual(sections.due, [])
        self.assertEqual(_levels(sections.upcoming), [1, 2, 3, 4, 5, 6, 7])

    def test_upcoming_ordered_by_due_then_level(self):
        self.state.get_level(7).next_due = "2024-01-02"

        sections = LeitnerScheduler.classify_levels(self.state, "2024-01-01")

        self.assertEqual(_levels(sections.upcoming), [2, 7, 3, 4, 5, 6])

    def test_due_lists_actionable_first(self):
        sections = LeitnerScheduler.classify_levels(self.state, "2024-01-04")

        self.assertEqual(_levels(sections.due), [1, 2, 3])

    def test_partition_covers_every_level_once(self):
        """Every level lands in exactly one section, at most one actionable."""
        state = initialize("2024-01-01")
        for day in range(0, 80, 3):
            today = add_days("2024-01-01", day)
            sections = LeitnerScheduler.classify_levels(state, today)
            head = [sections.actionable] if sections.actionable else []
            seen = _levels(head + sections.pending + sections.upcoming)

            self.assertEqual(sorted(seen), [1, 2, 3, 4, 5, 6, 7], today)
            if sections.actionable is None:
                self.assertEqual(sections.pending, [])
            if sections.actionable:
                LeitnerScheduler.complete(state, sections.actionable.level, today, ts=day)

    def test_blank_state(self):
        sections = LeitnerScheduler.classify_levels(ScheduleState.blank(), "2024-01-01")
        self.assertEqual(sections, Sections())

    def test_rejects_bad_today(self):
        with self.assertRaises(FormatError):
            LeitnerScheduler.classify_levels(self.state, "Jan 5")


class TestComplete(unittest.TestCase):
    """Tests for marking a level done."""

    def setUp(self):
        self.state = initialize("2024-01-01")

    def test_advances_from_previous_due_date(self):
        """Next due date counts from the old due date, not the review day."""
        entry = LeitnerScheduler.complete(self.state, 3, "2024-01-10", ts=1)
        lv = self.state.get_level(3)

        self.assertEqual(lv.next_due, "2024-01-08")
        self.assertEqual(lv.last_completed, "2024-01-10")
        self.assertEqual(entry, LogEntry(date="2024-01-10", level=3, ts=1, original_due="2024-01-04"))
        self.assertEqual(self.state.log, [entry])

    def test_catch_up_independent_of_lateness(self):
        """How late the review is must not change the next due date."""
        for on_date in ("2024-01-04", "2024-01-20", "2024-06-01"):
            state = initialize("2024-01-01")
            LeitnerScheduler.complete(state, 3, on_date, ts=1)
            self.assertEqual(state.get_level(3).next_due, "2024-01-08", on_date)

    def test_backlog_converges(self):
        """Clearing a backlog in order leaves every level due after today."""
        today = "2024-01-20"
        ts = 0
        while True:
            sections = LeitnerScheduler.classify_levels(self.state, today)
            if sections.actionable is None:
                break
            ts += 1
            LeitnerScheduler.complete(self.state, sections.actionable.level, today, ts)

        self.assertTrue(all(lv.next_due > today for lv in self.state.levels))
        # level 1 walked 01-01 -> 01-21 one day at a time
        self.assertEqual(self.state.get_level(1).next_due, "2024-01-21")
        self.assertEqual(self.state.get_level(4).next_due, "2024-01-24")

    def test_uses_stored_intervals(self):
        state = initialize("2024-01-01", intervals=[2, 3, 5, 7, 11, 13, 17])
        LeitnerScheduler.complete(state, 1, "2024-01-02", ts=1)

        self.assertEqual(state.get_level(1).next_due, "2024-01-04")

    def test_unknown_level(self):
        for level in (0, 8, -1, True):
            with self.assertRaises(NotFoundError):
                LeitnerScheduler.complete(self.state, level, "2024-01-01", ts=1)
        self.assertEqual(self.state.log, [])

    def test_blank_state(self):
        with self.assertRaises(NotFoundError):
            LeitnerScheduler.complete(ScheduleState.blank(), 1, "2024-01-01", ts=1)


class TestUndo(unittest.TestCase):
    """Tests for reverting a completion."""

    def setUp(self):
        self.state = initialize("2024-01-01")

    def test_round_trip(self):
        """complete then undo should restore the level and the log."""
        before = self.state.get_level(3)
        before = (before.next_due, before.last_completed)

        LeitnerScheduler.complete(self.state, 3, "2024-01-10", ts=1)
        entry = LeitnerScheduler.undo(self.state, 3, "2024-01-10")
        lv = self.state.get_level(3)

        self.assertEqual((lv.next_due, lv.last_completed), before)
        self.assertEqual(entry.original_due, "2024-01-04")
        self.assertEqual(self.state.log, [])

    def test_restores_stored_due_date(self):
        """Undo restores original_due verbatim instead of recomputing it."""
        self.state.log.append(LogEntry(date="2024-01-10", level=2, ts=1, original_due="2023-12-25"))

        LeitnerScheduler.undo(self.state, 2, "2024-01-10")

        self.assertEqual(self.state.get_level(2).next_due, "2023-12-25")

    def test_nothing_to_undo(self):
        with self.assertRaises(NothingToUndoError):
            LeitnerScheduler.undo(self.state, 1, "2024-01-01")

    def test_wrong_date_or_level(self):
        LeitnerScheduler.complete(self.state, 1, "2024-01-01", ts=1)

        with self.assertRaises(NothingToUndoError):
            LeitnerScheduler.undo(self.state, 1, "2024-01-02")
        with self.assertRaises(NothingToUndoError):
            LeitnerScheduler.undo(self.state, 2, "2024-01-01")
        self.assertEqual(len(self.state.log), 1)

    def test_same_day_undo_is_last_in_first_out(self):
        """Two completions on one day are undone newest first."""
        LeitnerScheduler.complete(self.state, 1, "2024-01-10", ts=1)
        LeitnerScheduler.complete(self.state, 1, "2024-01-10", ts=2)
        self.assertEqual(self.state.get_level(1).next_due, "2024-01-03")

        first = LeitnerScheduler.undo(self.state, 1, "2024-01-10")
        self.assertEqual(first.ts, 2)
        self.assertEqual(self.state.get_level(1).next_due, "2024-01-02")

        second = LeitnerScheduler.undo(self.state, 1, "2024-01-10")
        self.assertEqual(second.ts, 1)
        self.assertEqual(self.state.get_level(1).next_due, "2024-01-01")
        self.assertEqual(self.state.log, [])

    def test_picks_highest_ts_not_log_position(self):
        self.state.log.append(LogEntry(date="2024-01-10", level=1, ts=9, original_due="2024-01-05"))
        self.state.log.append(LogEntry(date="2024-01-10", level=1, ts=3, original_due="2024-01-04"))

        entry = LeitnerScheduler.undo(self.state, 1, "2024-01-10")

        self.assertEqual(entry.ts, 9)
        self.assertEqual([e.ts for e in self.state.log], [3])

    def test_stale_completion_is_refused(self):
        """A completion followed by a newer one of the same level cannot be undone first."""
        LeitnerScheduler.complete(self.state, 1, "2024-01-10", ts=1)
        LeitnerScheduler.complete(self.state, 1, "2024-01-11", ts=2)

        with self.assertRaises(NothingToUndoError):
            LeitnerScheduler.undo(self.state, 1, "2024-01-10")
        self.assertEqual(len(self.state.log), 2)

        LeitnerScheduler.undo(self.state, 1, "2024-01-11")
        LeitnerScheduler.undo(self.state, 1, "2024-01-10")
        self.assertEqual(self.state.get_level(1).next_due, "2024-01-01")

    def test_other_levels_untouched(self):
        LeitnerScheduler.complete(self.state, 1, "2024-01-02", ts=1)
        LeitnerScheduler.complete(self.state, 2, "2024-01-02", ts=2)

        LeitnerScheduler.undo(self.state, 1, "2024-01-02")

        self.assertEqual(self.state.get_level(2).next_due, "2024-01-04")
        self.assertEqual(self.state.get_level(2).last_completed, "2024-01-02")
        self.assertEqual([e.level for e in self.state.log], [2])

    def test_unknown_level(self):
        with self.assertRaises(NotFoundError):
            LeitnerScheduler.undo(self.state, 9, "2024-01-01")


class TestSummary(unittest.TestCase):
    """Tests for the read-side helpers."""

    def setUp(self):
        self.state = initialize("2024-01-01")

    def test_backlog_dates(self):
        """Distinct due dates before today, oldest first."""
        self.state.get_level(3).next_due = "2024-01-02"

        dates = LeitnerScheduler.backlog_dates(self.state, "2024-01-04")

        self.assertEqual(dates, ["2024-01-01", "2024-01-02"])

    def test_due_on(self):
        self.assertEqual(_levels(LeitnerScheduler.due_on(self.state, "2024-01-04")), [3])
        self.assertEqual(LeitnerScheduler.due_on(self.state, "2024-01-05"), [])

    def test_day_number(self):
        self.assertEqual(LeitnerScheduler.day_number(self.state, "2024-01-01"), 1)
        self.assertEqual(LeitnerScheduler.day_number(self.state, "2024-03-01"), 61)

    def test_day_number_without_schedule(self):
        with self.assertRaises(NotFoundError):
            LeitnerScheduler.day_number(ScheduleState.blank(), "2024-01-01")

    def test_status_backlog(self):
        summary = LeitnerScheduler.summarize(self.state, "2024-01-03")

        self.assertIsInstance(summary, Summary)
        self.assertEqual(summary.day_number, 3)
        self.assertEqual(summary.status_text(), "Backlog: 2 days pending (oldest: 2024-01-01).")

    def test_status_single_backlog_day(self):
        summary = LeitnerScheduler.summarize(self.state, "2024-01-02")

        self.assertEqual(summary.status_text(), "Backlog: 1 day pending (oldest: 2024-01-01).")

    def test_status_due_today(self):
        summary = LeitnerScheduler.summarize(self.state, "2024-01-01")

        self.assertEqual(summary.status_text(), "Due today: L1.")

    def test_status_caught_up(self):
        for lv in self.state.levels:
            lv.next_due = "2024-02-01"

        summary = LeitnerScheduler.summarize(self.state, "2024-01-10")

        self.assertEqual(summary.status_text(), "You're all caught up. Next due dates are shown below.")


if __name__ == "__main__":
    unittest.main()

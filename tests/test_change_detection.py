"""
Change detection: age-digit normalization and new-report comparison
"""

import pytest

from conftest import HAIL_REPORT, WIND_REPORT, load_feed
from change_detection import Comparison, get_comparison, normalize_line

SEEN_REPORTS = {
    r'Icon: 41.338901,-96.059708,000,0,5,"Reported By: Will Dupe\nHigh Wind\nTime: 2018-09-21 00:26:06 UTC\n50 mphNotes: None"',
    r'Icon: 47.617706,-111.215248,000,0,4,"Reported By: Will Dupe\nHail\nTime: 2018-09-20 22:49:29 UTC\nSize: 0.75" (Penny)\nNotes: None"',
    r'Icon: 43.112000,-94.610001,000,0,6,"Reported By: Will Dupe\nFlooding\nTime: 2018-09-20 22:58:00 UTC\nNotes: Water over road on US 18"',
    r'Icon: 35.851399,-90.708198,000,0,8,"Reported By: Will Dupe\nOther - See Note\nTime: 2018-11-14 20:22:00 UTC\nNotes: i got snow and a little of sleet"',
    r'Icon: 41.230400,-95.850403,000,0,3,"Reported By: Will Dupe\nNot Rotating Wall Cloud\nTime: 2018-09-21 00:34:00 UTC\nNotes: None"',
}


def with_age(line: str, age: str) -> str:
    return line.replace(",000,4,", f",000,{age},", 1)


class TestNormalizeLine:

    def test_zeroes_icon_digit(self):
        expected = with_age(HAIL_REPORT, "0")
        assert normalize_line(HAIL_REPORT) == expected

    @pytest.mark.parametrize("age", ["3", "4", "5"])
    def test_aging_variants_share_identity(self, age):
        assert normalize_line(with_age(HAIL_REPORT, age)) == normalize_line(HAIL_REPORT)

    @pytest.mark.parametrize("age", ["0", "1", "2", "6", "9"])
    def test_other_digits_are_left_alone(self, age):
        line = with_age(HAIL_REPORT, age)
        assert normalize_line(line) == line

    def test_idempotent(self):
        once = normalize_line(HAIL_REPORT)
        assert normalize_line(once) == once

    def test_only_the_age_field_is_rewritten(self):
        line = (
            r'Icon: 43.112000,-94.610001,000,3,6,"Reported By: Will Dupe\nFlooding\n'
            r'Time: 2018-09-20 22:58:00 UTC\nNotes: Damage near 1,000,300 block"'
        )
        normalized = normalize_line(line)
        assert normalized.startswith("Icon: 43.112000,-94.610001,000,0,6,")
        assert normalized.endswith('Notes: Damage near 1,000,300 block"')


class TestGetComparison:

    def test_empty_report_returns_nothing(self):
        comparison = get_comparison(load_feed("reports-empty"), set())
        assert comparison == Comparison()
        assert len(comparison.latest_set) == 0
        assert len(comparison.new) == 0

    @pytest.mark.parametrize("body", ["", "   ", "\n\t\n"])
    def test_blank_bodies(self, body):
        comparison = get_comparison(body, set())
        assert comparison.latest_set == set()
        assert comparison.new == []

    def test_no_current_seen_returns_all_reports(self, reports_body):
        comparison = get_comparison(reports_body, set())
        assert len(comparison.latest_set) == 12
        assert len(comparison.new) == 12
        assert set(comparison.new) == comparison.latest_set

    def test_new_is_sorted(self, reports_body):
        comparison = get_comparison(reports_body, set())
        assert comparison.new == sorted(comparison.new)

    def test_header_lines_are_ignored(self, reports_body):
        comparison = get_comparison(reports_body, set())
        assert all(line.startswith("Icon:") for line in comparison.latest_set)

    def test_verbatim_repeats_collapse(self):
        body = "\n".join([HAIL_REPORT, HAIL_REPORT, HAIL_REPORT])
        comparison = get_comparison(body, set())
        assert len(comparison.latest_set) == 1
        assert comparison.new == [normalize_line(HAIL_REPORT)]

    def test_same_report_different_age_digit_is_deduped(self):
        comparison = get_comparison(with_age(HAIL_REPORT, "4"), set())
        assert len(comparison.latest_set) == 1
        assert len(comparison.new) == 1

        body = "\n".join([with_age(HAIL_REPORT, "5"), "            " + with_age(HAIL_REPORT, "6")])
        comparison = get_comparison(body, comparison.latest_set)
        assert len(comparison.latest_set) == 1
        assert len(comparison.new) == 0

    def test_handles_previously_seen_reports(self, reports_body):
        comparison = get_comparison(reports_body, set(SEEN_REPORTS))
        assert len(comparison.latest_set) == 12
        assert SEEN_REPORTS <= comparison.latest_set
        assert len(comparison.new) == len(comparison.latest_set) - len(SEEN_REPORTS)
        assert not SEEN_REPORTS & set(comparison.new)

    def test_latest_set_replaces_rather_than_accumulates(self, reports_body):
        hail_line = next(line for line in reports_body.splitlines() if "Will Dupe\\nHail" in line)

        first = get_comparison(reports_body, set())
        second = get_comparison(with_age(hail_line, "5"), first.latest_set)

        assert second.latest_set == {normalize_line(hail_line)}
        assert second.new == []

        # A report that dropped out of the window is new again if it comes back
        third = get_comparison(reports_body, second.latest_set)
        assert len(third.new) == 11

    def test_crlf_bodies(self, reports_body):
        comparison = get_comparison(reports_body.replace("\n", "\r\n"), set())
        assert len(comparison.latest_set) == 12

    @pytest.mark.parametrize("separator", ["\x85", "\u2028", "\x0c", "\x1e"])
    def test_unicode_separators_inside_notes_do_not_split_a_report(self, separator):
        line = WIND_REPORT.replace("with anemometer", f"with anemometer{separator} big gusts")

        comparison = get_comparison(f"Refresh: 1\n{line}\n", set())

        assert comparison.new == [normalize_line(line)]
        assert comparison.new[0].endswith(' big gusts"')

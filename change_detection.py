"""
Change detection for the Spotter Network feed.

The feed has no offset or pagination, so every poll returns the whole sliding
window of recent reports and the same report is seen many times. Worse, the
icon "age" digit of a report changes as it ages, so lines have to be
normalized before they can be compared across polls.
"""
import re
from dataclasses import dataclass, field
from typing import List, Set

REPORT_MARKER = "Icon:"

# Only \n and \r\n end a report; str.splitlines() also breaks on \x85 and \u2028
_LINE_BREAK = re.compile(r"\r?\n")

# lat,lon,000,<age digit>,...
_AGE_DIGIT = re.compile(r"^(Icon:\s*[^,]*,[^,]*,000,)[345](?=,)")


@dataclass
class Comparison:
    latest_set: Set[str] = field(default_factory=set)
    new: List[str] = field(default_factory=list)


def normalize_line(line: str) -> str:
    """Zero the age digit (3, 4 or 5) so an aging report keeps one identity"""
    return _AGE_DIGIT.sub(r"\g<1>0", line, count=1)


def get_comparison(body: str, seen: Set[str]) -> Comparison:
    """
    Compare the current feed body against the reports seen on the previous poll.

    latest_set replaces the caller's seen set wholesale; it is never merged with
    the previous one, so reports that drop out of the feed stop being tracked.
    new is sorted so callers get a stable order.
    """
    latest_set = {
        normalize_line(line)
        for line in _LINE_BREAK.split(body)
        if line.startswith(REPORT_MARKER)
    }

    new = sorted(line for line in latest_set if line not in seen)

    return Comparison(latest_set=latest_set, new=new)

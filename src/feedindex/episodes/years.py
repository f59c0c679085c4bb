"""Chronological bucketing of episode years into labeled spans.

Distinct populated years are split into contiguous spans that try to hold at
least a minimum number of episodes. Spans never cover a year without
episodes, so "1999-2001" always means every year from 1999 through 2001 has
at least one episode.
"""

import logging
import re
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from feedindex.episodes.models import EpisodeRecord
from feedindex.utils.errors import InvalidYearRangeError

logger = logging.getLogger(__name__)

_SPAN_PATTERN = re.compile(r"^\s*(\d{1,4})\s*(?:-\s*(\d{1,4})\s*)?$")


@dataclass(frozen=True)
class YearSpan:
    """Inclusive range of years rendered as "YYYY" or "YYYY-YYYY"."""

    start: int
    end: int

    @classmethod
    def parse(cls, label: str) -> "YearSpan":
        """Parse a span label.

        Raises:
            InvalidYearRangeError: If the label is malformed or reversed
        """
        if not isinstance(label, str):
            raise InvalidYearRangeError(label)
        match = _SPAN_PATTERN.match(label)
        if match is None:
            raise InvalidYearRangeError(label)

        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else start
        if start > end:
            raise InvalidYearRangeError(label)
        return cls(start, end)

    @property
    def label(self) -> str:
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"

    @property
    def is_single_year(self) -> bool:
        return self.start == self.end

    def years(self) -> range:
        return range(self.start, self.end + 1)

    def contains(self, year: int | None) -> bool:
        return year is not None and self.start <= year <= self.end

    def precedes(self, other: "YearSpan") -> bool:
        """True when ``other`` starts the calendar year after this span ends."""
        return self.end + 1 == other.start

    def joined(self, other: "YearSpan") -> "YearSpan":
        return YearSpan(min(self.start, other.start), max(self.end, other.end))

    def __str__(self) -> str:
        return self.label


def count_years(episodes: Iterable[EpisodeRecord]) -> dict[int, int]:
    """Episode count per recording year; undated episodes are ignored."""
    counts = Counter(
        episode.recording_year
        for episode in episodes
        if episode.recording_year is not None
    )
    return dict(counts)


def _accumulate(year_counts: Mapping[int, int], min_threshold: int) -> list[YearSpan]:
    years = sorted(year for year, count in year_counts.items() if count > 0)
    spans: list[YearSpan] = []
    span_start: int | None = None
    running = 0

    for i, year in enumerate(years):
        if span_start is None:
            span_start = year
        running += year_counts[year]

        is_last = i == len(years) - 1
        gap_follows = not is_last and years[i + 1] != year + 1
        if running >= min_threshold or gap_follows or is_last:
            spans.append(YearSpan(span_start, year))
            span_start = None
            running = 0

    return spans


def _span_total(span: YearSpan, year_counts: Mapping[int, int]) -> int:
    return sum(year_counts.get(year, 0) for year in span.years())


def _absorb_singletons(
    spans: list[YearSpan], year_counts: Mapping[int, int], min_threshold: int
) -> list[YearSpan]:
    pending = list(spans)
    merged: list[YearSpan] = []

    for i, span in enumerate(pending):
        if not span.is_single_year or _span_total(span, year_counts) >= min_threshold:
            merged.append(span)
            continue

        # Backward first, then forward into the span not yet visited
        if merged and merged[-1].precedes(span):
            merged[-1] = merged[-1].joined(span)
        elif i + 1 < len(pending) and span.precedes(pending[i + 1]):
            pending[i + 1] = span.joined(pending[i + 1])
        else:
            merged.append(span)

    return merged


def _consolidate(spans: list[YearSpan]) -> list[YearSpan]:
    consolidated: list[YearSpan] = []
    for span in spans:
        if consolidated and consolidated[-1].precedes(span):
            consolidated[-1] = consolidated[-1].joined(span)
        else:
            consolidated.append(span)
    return consolidated


def bucket_years(year_counts: Mapping[int, int], min_threshold: int) -> list[YearSpan]:
    """Partition populated years into chronological spans.

    1. Walk populated years ascending, closing a span once its episode total
       reaches ``min_threshold``, before a calendar gap, or at the last year.
    2. A single-year span still under threshold merges into the previous
       span when contiguous, otherwise into the next one, otherwise stays.
    3. Adjacent contiguous spans are merged regardless of size.

    Args:
        year_counts: Episode count per year
        min_threshold: Episode total a span tries to reach

    Returns:
        Spans in ascending order covering exactly the populated years
    """
    initial = _accumulate(year_counts, min_threshold)
    if not initial:
        return []

    absorbed = _absorb_singletons(initial, year_counts, min_threshold)
    spans = _consolidate(absorbed)

    logger.debug(
        "Bucketed %d years into %d spans (threshold %d): %s",
        len(year_counts),
        len(spans),
        min_threshold,
        [span.label for span in spans],
    )
    return spans


def bucket_episode_years(
    episodes: Iterable[EpisodeRecord], min_threshold: int
) -> list[YearSpan]:
    """Year spans for the recording years present in ``episodes``."""
    return bucket_years(count_years(episodes), min_threshold)

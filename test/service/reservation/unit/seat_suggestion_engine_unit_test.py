"""
Unit tests for SeatSuggestionEngine

Tests:
- Contiguous runs (gaps, non-numeric seats, duplicate numbers)
- Ranking: centre section, exact fit, row proximity
- Fallback to individual seats and failure when too few seats remain
"""

from typing import Callable, List
from uuid import UUID

import pytest

from src.service.reservation.domain.entity.seat_entity import ShowSeat
from src.service.reservation.domain.seat_suggestion_domain import (
    SeatSuggestionEngine,
    SeatSuggestionRequest,
)


RowFactory = Callable[..., List[ShowSeat]]


def _numbers(seats: List[ShowSeat]) -> List[int]:
    return [seat.seat.seat_number_value or 0 for seat in seats]


@pytest.fixture
def engine() -> SeatSuggestionEngine:
    return SeatSuggestionEngine()


@pytest.mark.unit
class TestFindRuns:
    def test_gap_splits_row_into_runs(self, row_factory: RowFactory, event_id: UUID) -> None:
        seats = row_factory(event_id, section='Center', row_name='A', numbers=[1, 2, 3, 5, 6])

        runs = SeatSuggestionEngine.find_runs(seats, 2)

        assert [_numbers(list(run.seats)) for run in runs] == [[1, 2, 3], [5, 6]]

    def test_short_runs_are_dropped(self, row_factory: RowFactory, event_id: UUID) -> None:
        seats = row_factory(event_id, section='Center', row_name='A', numbers=[1, 3, 5])
        assert SeatSuggestionEngine.find_runs(seats, 2) == []

    def test_non_numeric_seats_never_join_a_run(
        self, row_factory: RowFactory, show_seat_factory: Callable[..., ShowSeat], event_id: UUID
    ) -> None:
        seats = row_factory(event_id, section='Center', row_name='A', numbers=[1, 2])
        seats.append(show_seat_factory(event_id, section='Center', row_name='A', seat_number='2A'))

        runs = SeatSuggestionEngine.find_runs(seats, 3)

        assert runs == []

    def test_rows_are_not_merged(self, row_factory: RowFactory, event_id: UUID) -> None:
        seats = row_factory(event_id, section='Center', row_name='A', numbers=[1, 2])
        seats += row_factory(event_id, section='Center', row_name='B', numbers=[3, 4])
        assert SeatSuggestionEngine.find_runs(seats, 3) == []


@pytest.mark.unit
class TestSuggest:
    def test_ten_contiguous_seats_give_ideal_match(
        self, engine: SeatSuggestionEngine, row_factory: RowFactory, event_id: UUID
    ) -> None:
        # Given: 10 contiguous available seats in one row
        seats = row_factory(event_id, section='Orchestra', row_name='C', numbers=list(range(1, 11)))

        # When
        result = engine.suggest(SeatSuggestionRequest(event_id=event_id, count=3), seats)

        # Then: a contiguous 3-seat block from the middle of the row
        assert result.success is True
        assert result.ideal_match is True
        assert _numbers(result.seats) == [4, 5, 6]
        assert result.available_count == 10

    def test_scattered_two_seats_for_three_requested_fails(
        self, engine: SeatSuggestionEngine, row_factory: RowFactory, event_id: UUID
    ) -> None:
        seats = row_factory(event_id, section='Center', row_name='A', numbers=[2])
        seats += row_factory(event_id, section='Left', row_name='F', numbers=[9])

        result = engine.suggest(SeatSuggestionRequest(event_id=event_id, count=3), seats)

        assert result.success is False
        assert result.available_count == 2
        assert result.seats == []

    def test_center_section_wins_when_preferred(
        self, engine: SeatSuggestionEngine, row_factory: RowFactory, event_id: UUID
    ) -> None:
        # Given: an exact fit in a side section's front row, a longer run in the centre further back
        seats = row_factory(event_id, section='Left Orchestra', row_name='A', numbers=[1, 2])
        seats += row_factory(event_id, section='Center Orchestra', row_name='K', numbers=[1, 2, 3, 4])

        preferred = engine.suggest(
            SeatSuggestionRequest(event_id=event_id, count=2, prefer_center=True), seats
        )
        indifferent = engine.suggest(
            SeatSuggestionRequest(event_id=event_id, count=2, prefer_center=False), seats
        )

        assert {seat.seat.section for seat in preferred.seats} == {'Center Orchestra'}
        assert _numbers(preferred.seats) == [2, 3]
        assert {seat.seat.section for seat in indifferent.seats} == {'Left Orchestra'}

    def test_exact_fit_beats_longer_run(
        self, engine: SeatSuggestionEngine, row_factory: RowFactory, event_id: UUID
    ) -> None:
        seats = row_factory(event_id, section='Center', row_name='A', numbers=[1, 2, 3, 4, 5])
        seats += row_factory(event_id, section='Center', row_name='D', numbers=[10, 11])

        result = engine.suggest(SeatSuggestionRequest(event_id=event_id, count=2), seats)

        assert result.seats[0].seat.row_name == 'D'
        assert _numbers(result.seats) == [10, 11]

    def test_front_row_breaks_ties(
        self, engine: SeatSuggestionEngine, row_factory: RowFactory, event_id: UUID
    ) -> None:
        seats = row_factory(event_id, section='Center', row_name='AA', numbers=[1, 2])
        seats += row_factory(event_id, section='Center', row_name='B', numbers=[1, 2])
        seats += row_factory(event_id, section='Center', row_name='12', numbers=[1, 2])

        result = engine.suggest(SeatSuggestionRequest(event_id=event_id, count=2), seats)

        assert result.seats[0].seat.row_name == 'B'

    def test_fallback_when_no_run_is_long_enough(
        self, engine: SeatSuggestionEngine, row_factory: RowFactory, event_id: UUID
    ) -> None:
        seats = row_factory(event_id, section='Center', row_name='A', numbers=[1, 3, 5, 7])

        result = engine.suggest(SeatSuggestionRequest(event_id=event_id, count=3), seats)

        assert result.success is True
        assert result.ideal_match is False
        assert len(result.seats) == 3
        # 3 and 5 sit next to the row midpoint (4); 1 wins the tie with 7 on seat number
        assert _numbers(result.seats) == [3, 5, 1]

    def test_keep_together_false_skips_runs(
        self, engine: SeatSuggestionEngine, row_factory: RowFactory, event_id: UUID
    ) -> None:
        seats = row_factory(event_id, section='Center', row_name='A', numbers=[1, 2, 3])

        result = engine.suggest(
            SeatSuggestionRequest(event_id=event_id, count=2, keep_together=False), seats
        )

        assert result.success is True
        assert result.ideal_match is False
        assert len(result.seats) == 2

    def test_handicap_filter_counts_only_accessible_seats(
        self,
        engine: SeatSuggestionEngine,
        show_seat_factory: Callable[..., ShowSeat],
        event_id: UUID,
    ) -> None:
        seats = [
            show_seat_factory(event_id, seat_number=str(number), handicap_access=number <= 2)
            for number in range(1, 6)
        ]

        result = engine.suggest(
            SeatSuggestionRequest(event_id=event_id, count=3, require_handicap_access=True),
            seats,
        )

        assert result.success is False
        assert result.available_count == 2

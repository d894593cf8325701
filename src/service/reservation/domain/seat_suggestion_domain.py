"""
Seat suggestion domain.

Read-only heuristic that proposes a good block of seats for a shopper. It only sees seats that
are already logically available; it never locks or mutates anything.
"""

from dataclasses import dataclass, field
from itertools import groupby
import math
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from src.platform.logging.loguru_io import Logger
from src.service.reservation.domain.entity.seat_entity import ShowSeat
from src.service.reservation.domain.enum.section_type import SectionType


@dataclass(frozen=True)
class SeatSuggestionRequest:
    event_id: UUID
    count: int
    prefer_center: bool = True
    keep_together: bool = True
    require_handicap_access: bool = False


@dataclass
class SeatSuggestionResult:
    success: bool
    seats: List[ShowSeat] = field(default_factory=list)
    ideal_match: bool = False
    available_count: int = 0
    message: str = ''

    @classmethod
    def success_result(
        cls, seats: List[ShowSeat], *, ideal_match: bool, available_count: int, message: str
    ) -> 'SeatSuggestionResult':
        return cls(
            success=True,
            seats=seats,
            ideal_match=ideal_match,
            available_count=available_count,
            message=message,
        )

    @classmethod
    def failure_result(cls, *, available_count: int, message: str) -> 'SeatSuggestionResult':
        return cls(success=False, available_count=available_count, message=message)


@dataclass(frozen=True)
class SeatRun:
    """Seats of one row whose numbers are consecutive integers"""

    section: str
    row_name: str
    seats: Tuple[ShowSeat, ...]

    @property
    def length(self) -> int:
        return len(self.seats)


def _row_key(seat: ShowSeat) -> Tuple[str, str]:
    return seat.seat.section, seat.seat.row_name


def _row_proximity(seat: ShowSeat) -> Tuple[int, int]:
    # Unknown rows sort after every known row
    rank = seat.seat.row_rank
    return (0, rank) if rank is not None else (1, 0)


class SeatSuggestionEngine:
    """
    Best-block heuristic

    Ranking (lower is better):
    1. Section centrality: center before left/right/unknown, only when prefer_center
    2. Excess length of the run over the requested count (exact fits first)
    3. Row proximity to the front, when the row can be ranked
    """

    @Logger.io
    def suggest(
        self, request: SeatSuggestionRequest, available_seats: List[ShowSeat]
    ) -> SeatSuggestionResult:
        candidates = available_seats
        if request.require_handicap_access:
            candidates = [seat for seat in candidates if seat.seat.handicap_access]

        if len(candidates) < request.count:
            return SeatSuggestionResult.failure_result(
                available_count=len(candidates),
                message=(
                    f'Only {len(candidates)} seat(s) available, {request.count} requested'
                ),
            )

        if request.keep_together:
            runs = self.find_runs(candidates, request.count)
            if runs:
                best_run = min(runs, key=lambda run: self._run_rank_key(run, request))
                selected = self._pick_window(best_run, request.count, request.prefer_center)
                Logger.base.info(
                    f'[SUGGEST] Contiguous block: {best_run.section} row {best_run.row_name} '
                    f'({request.count}/{best_run.length})'
                )
                return SeatSuggestionResult.success_result(
                    selected,
                    ideal_match=True,
                    available_count=len(candidates),
                    message=(
                        f'Found {request.count} seats together in {best_run.section} '
                        f'row {best_run.row_name}'
                    ),
                )

        selected = self._best_individual_seats(candidates, request)
        Logger.base.info(f'[SUGGEST] Fallback to {len(selected)} individual seats')
        message = (
            f'Could not find {request.count} seats together, suggesting the best available seats'
            if request.keep_together
            else f'Suggesting the best {request.count} available seats'
        )
        return SeatSuggestionResult.success_result(
            selected,
            ideal_match=False,
            available_count=len(candidates),
            message=message,
        )

    @staticmethod
    def find_runs(seats: List[ShowSeat], count: int) -> List[SeatRun]:
        """All maximal runs of consecutive seat numbers with length >= count"""
        numbered = sorted(
            (seat for seat in seats if seat.seat.seat_number_value is not None),
            key=lambda seat: (_row_key(seat), seat.seat.seat_number_value),
        )

        runs: List[SeatRun] = []
        for (section, row_name), row_iter in groupby(numbered, key=_row_key):
            current: List[ShowSeat] = []
            for seat in row_iter:
                number = seat.seat.seat_number_value
                if current and number == current[-1].seat.seat_number_value:
                    continue  # duplicate seat number in the same row
                if current and number != current[-1].seat.seat_number_value + 1:
                    if len(current) >= count:
                        runs.append(SeatRun(section, row_name, tuple(current)))
                    current = []
                current.append(seat)
            if len(current) >= count:
                runs.append(SeatRun(section, row_name, tuple(current)))
        return runs

    @staticmethod
    def _centrality(section: str, prefer_center: bool) -> int:
        if not prefer_center:
            return 0
        return 0 if SectionType.from_section_name(section) == SectionType.CENTER else 1

    def _run_rank_key(self, run: SeatRun, request: SeatSuggestionRequest) -> tuple:
        first = run.seats[0]
        return (
            self._centrality(run.section, request.prefer_center),
            run.length - request.count,
            _row_proximity(first),
            run.section,
            run.row_name,
            first.seat.seat_number_value,
        )

    @staticmethod
    def _pick_window(run: SeatRun, count: int, prefer_center: bool) -> List[ShowSeat]:
        start = (run.length - count) // 2 if prefer_center else 0
        return list(run.seats[start : start + count])

    def _best_individual_seats(
        self, seats: List[ShowSeat], request: SeatSuggestionRequest
    ) -> List[ShowSeat]:
        row_midpoints: Dict[Tuple[str, str], float] = {}
        for key, row_iter in groupby(sorted(seats, key=_row_key), key=_row_key):
            numbers = [
                seat.seat.seat_number_value
                for seat in row_iter
                if seat.seat.seat_number_value is not None
            ]
            if numbers:
                row_midpoints[key] = (min(numbers) + max(numbers)) / 2

        def seat_position(seat: ShowSeat) -> float:
            number: Optional[int] = seat.seat.seat_number_value
            if number is None:
                return math.inf
            if request.prefer_center:
                return abs(number - row_midpoints[_row_key(seat)])
            return number

        ranked = sorted(
            seats,
            key=lambda seat: (
                self._centrality(seat.seat.section, request.prefer_center),
                _row_proximity(seat),
                seat.seat.section,
                seat.seat.row_name,
                seat_position(seat),
                seat.seat.seat_number,
            ),
        )
        return ranked[: request.count]

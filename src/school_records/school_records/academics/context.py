"""Academic year/quarter context resolved once per request.

Services and evaluators take an `AcademicContext` argument instead of looking
up "the current academic year" on their own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import today_local
from ..core.exceptions import NotFoundError
from .model import AcademicYear, Quarter
from .repository import AcademicYearRepository, QuarterRepository


@dataclass(frozen=True)
class AcademicContext:
    academic_year: AcademicYear
    quarters: tuple[Quarter, ...] = field(default_factory=tuple)
    today: date = field(default_factory=today_local)

    @property
    def academic_year_id(self) -> int:
        return self.academic_year.academic_year_id

    @property
    def quarter_ids(self) -> list[int]:
        return [q.quarter_id for q in self.quarters]

    def quarter_for(self, day: date) -> Optional[Quarter]:
        for q in self.quarters:
            if q.contains(day):
                return q
        return None

    def current_quarter(self) -> Optional[Quarter]:
        return self.quarter_for(self.today) or (self.quarters[0] if self.quarters else None)

    def get_quarter(self, quarter_id: int) -> Quarter:
        for q in self.quarters:
            if q.quarter_id == int(quarter_id):
                return q
        raise NotFoundError("Quarter not found in this academic year")

    def to_dict(self) -> dict:
        return {"id": self.academic_year.academic_year_id, "name": self.academic_year.name}


class AcademicContextResolver:
    def __init__(self, years: AcademicYearRepository, quarters: QuarterRepository):
        self._years = years
        self._quarters = quarters

    def _resolve_year(self, academic_year_id: Optional[int]) -> AcademicYear:
        if academic_year_id:
            year = self._years.get_by_id(int(academic_year_id))
            if not year:
                raise NotFoundError("Academic year not found")
            return year

        year = self._years.get_current() or self._years.get_most_recent()
        if not year:
            raise NotFoundError("No academic year found")
        return year

    def resolve(self, academic_year_id: Optional[int] = None, *, today: Optional[date] = None) -> AcademicContext:
        year = self._resolve_year(academic_year_id)
        quarters: Sequence[Quarter] = self._quarters.list_for_year(year.academic_year_id)
        return AcademicContext(
            academic_year=year,
            quarters=tuple(sorted(quarters, key=lambda q: q.start_date)),
            today=today or today_local(),
        )

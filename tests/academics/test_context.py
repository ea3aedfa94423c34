from datetime import date

import pytest

from src.school_records.school_records.academics.context import AcademicContextResolver
from src.school_records.school_records.academics.model import AcademicYear
from src.school_records.school_records.core.exceptions import NotFoundError

from tests.fakes import QUARTERS, YEAR, InMemoryQuarters, InMemoryYears, make_context

OLD_YEAR = AcademicYear(2, "2024-2025", date(2024, 8, 5), date(2025, 4, 30), is_current=False)


def test_resolves_current_year_with_ordered_quarters():
    resolver = AcademicContextResolver(InMemoryYears([OLD_YEAR, YEAR]), InMemoryQuarters(tuple(reversed(QUARTERS))))

    context = resolver.resolve(today=date(2025, 11, 3))

    assert context.academic_year_id == 1
    assert context.quarter_ids == [1, 2, 3, 4]
    assert context.current_quarter().quarter_id == 2


def test_falls_back_to_most_recent_year():
    years = InMemoryYears([AcademicYear(1, "2025-2026", YEAR.start_date, YEAR.end_date), OLD_YEAR])

    context = AcademicContextResolver(years, InMemoryQuarters()).resolve()

    assert context.academic_year_id == 2


def test_explicit_year_must_exist():
    resolver = AcademicContextResolver(InMemoryYears(), InMemoryQuarters())

    with pytest.raises(NotFoundError):
        resolver.resolve(42)


def test_no_year_at_all():
    with pytest.raises(NotFoundError):
        AcademicContextResolver(InMemoryYears([]), InMemoryQuarters()).resolve()


def test_quarter_lookup():
    context = make_context(today=date(2025, 7, 1))

    assert context.quarter_for(date(2026, 1, 12)).name == "3rd Quarter"
    assert context.quarter_for(date(2025, 7, 1)) is None
    # Outside every quarter the earliest one is used.
    assert context.current_quarter().quarter_id == 1
    with pytest.raises(NotFoundError):
        context.get_quarter(9)

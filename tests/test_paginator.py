import pandas as pd
import pytest

from cricstats.services.records.criteria import Pagination, SortDirection, SortSpec
from cricstats.services.records.errors import InvalidSortFieldError
from cricstats.services.records.paginator import ResultPaginator, to_records
from cricstats.services.records.sort_order import BATTING_SUMMARY_SORTS, TEAM_SUMMARY_SORTS, SortOrder


def _sample_rows(count: int) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "player_id": range(1, count + 1),
            "sort_name_part": [f"Player {index:02d}" for index in range(1, count + 1)],
            "runs": [100 * (index % 5) for index in range(1, count + 1)],
            "_highest_score": [50.5] * count,
        }
    )


def _paginator() -> ResultPaginator:
    return ResultPaginator(BATTING_SUMMARY_SORTS, ("player_id",))


def test_third_page_of_twenty_five_rows():
    page = _paginator().paginate(_sample_rows(25), SortSpec(), Pagination(offset=20, page_size=10))

    assert page.total_count == 25
    assert len(page.rows) == 5


def test_paging_past_the_end_keeps_the_total():
    page = _paginator().paginate(_sample_rows(25), SortSpec(), Pagination(offset=40, page_size=10))

    assert page.rows == []
    assert page.total_count == 25


def test_equal_values_are_ordered_by_name():
    page = _paginator().paginate(_sample_rows(10), SortSpec(), Pagination(offset=0, page_size=10))

    top = [row["sort_name_part"] for row in page.rows[:2]]
    assert [row["runs"] for row in page.rows[:2]] == [400, 400]
    assert top == ["Player 04", "Player 09"]


def test_ascending_sort_on_name():
    sort = SortSpec(field=SortOrder.SORT_NAME_PART, direction=SortDirection.ASC)
    page = _paginator().paginate(_sample_rows(3), sort, Pagination(offset=0, page_size=2))

    assert [row["player_id"] for row in page.rows] == [1, 2]


def test_repeated_requests_return_the_same_order():
    rows = _sample_rows(30)
    pagination = Pagination(offset=5, page_size=10)

    first = _paginator().paginate(rows, SortSpec(), pagination)
    second = _paginator().paginate(rows.sample(frac=1, random_state=3), SortSpec(), pagination)

    assert first.rows == second.rows


def test_sort_field_outside_the_category_is_rejected():
    with pytest.raises(InvalidSortFieldError):
        ResultPaginator(TEAM_SUMMARY_SORTS).paginate(
            _sample_rows(3), SortSpec(field=SortOrder.BBI), Pagination()
        )


def test_rejected_even_when_there_are_no_rows():
    with pytest.raises(InvalidSortFieldError):
        _paginator().validate(SortSpec(field=SortOrder.WICKET_KEEPER_DISMISSALS))


def test_records_hide_sort_keys_and_turn_nan_into_none():
    frame = pd.DataFrame({"runs": [10.0, float("nan")], "_not_out_adjusted_score": [10.5, 0.0]})
    assert to_records(frame) == [{"runs": 10.0}, {"runs": None}]


def test_invalid_pagination_is_refused():
    with pytest.raises(ValueError):
        Pagination(offset=-1)
    with pytest.raises(ValueError):
        Pagination(page_size=0)

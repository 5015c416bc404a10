from functools import reduce

import pytest

from beampack.geometry import Placement, Rect, RectGroup

SIDE = 8
PADD = 4


def P(x, y, w, h):
    return Placement(x, y, Rect(w, h))


def subtract_all(lhs, rhs_list):
    return reduce(
        lambda acc, rhs: [part for item in acc for part in item.subtract(rhs)],
        rhs_list,
        [lhs],
    )


def test_rect_area():
    rect = Rect(8, 8)
    assert rect.area() == 64
    assert rect.fill_area() == 64


def test_rect_group_area():
    small = Rect(8, 8)
    large = Rect(16, 16)
    group = RectGroup(
        [
            Placement(0, 0, large),
            Placement(16, 0, small),
            Placement(16, 8, small),
            Placement(24, 0, small),
            Placement(24, 8, small),
        ]
    )
    assert group.area() == 512
    assert group.fill_area() == 512

    column = RectGroup([Placement(0, y, small) for y in (0, 8, 16, 24, 32)])
    assert column.area() == 320
    assert column.fill_area() == 320


def test_empty_group_has_no_area():
    group = RectGroup()
    assert (group.w, group.h, group.area(), group.fill_area()) == (0, 0, 0, 0)


def test_basic_split_functions():
    lhs = P(0, 0, SIDE, SIDE)
    assert lhs.subtract(lhs) == []

    assert P(0, 15, 32, 43).overlaps(P(15, 0, 12, 16))
    assert P(16, 0, 16, 58).overlaps(P(16, 0, 14, 14))


def test_basic_split_in_corner():
    lhs = P(0, 0, SIDE, SIDE)
    rhs_n = P(0, PADD, SIDE, SIDE)
    rhs_s = P(0, 0, SIDE, PADD)
    rhs_e = P(PADD, 0, SIDE, SIDE)
    rhs_w = P(0, 0, PADD, SIDE)

    assert lhs.split_n(rhs_n) == P(0, 0, SIDE, PADD)
    assert lhs.split_s(rhs_s) == P(0, PADD, SIDE, PADD)
    assert lhs.split_e(rhs_e) == P(0, 0, PADD, SIDE)
    assert lhs.split_w(rhs_w) == P(PADD, 0, PADD, SIDE)

    assert subtract_all(lhs, [rhs_n, rhs_s, rhs_e, rhs_w]) == []


def test_basic_split_in_center():
    lhs = P(PADD, PADD, SIDE, SIDE)
    rhs_n = P(PADD, SIDE, SIDE, SIDE)
    rhs_s = P(PADD, 0, SIDE, SIDE)
    rhs_e = P(SIDE, PADD, SIDE, SIDE)
    rhs_w = P(0, PADD, SIDE, SIDE)

    assert lhs.split_n(rhs_n) == P(PADD, PADD, SIDE, PADD)
    assert lhs.split_s(rhs_s) == P(PADD, SIDE, SIDE, PADD)
    assert lhs.split_e(rhs_e) == P(PADD, PADD, PADD, SIDE)
    assert lhs.split_w(rhs_w) == P(SIDE, PADD, PADD, SIDE)

    assert subtract_all(lhs, [rhs_n, rhs_s, rhs_e, rhs_w]) == []


def test_inter_split_in_corner():
    lhs = P(PADD, PADD, SIDE, SIDE)

    assert lhs.subtract(P(SIDE, SIDE, SIDE, SIDE)) == [
        P(PADD, PADD, SIDE, PADD),
        P(PADD, PADD, PADD, SIDE),
    ]
    assert lhs.subtract(P(0, SIDE, SIDE, SIDE)) == [
        P(PADD, PADD, SIDE, PADD),
        P(SIDE, PADD, PADD, SIDE),
    ]
    assert lhs.subtract(P(SIDE, 0, SIDE, SIDE)) == [
        P(PADD, SIDE, SIDE, PADD),
        P(PADD, PADD, PADD, SIDE),
    ]
    assert lhs.subtract(P(0, 0, SIDE, SIDE)) == [
        P(PADD, SIDE, SIDE, PADD),
        P(SIDE, PADD, PADD, SIDE),
    ]


def test_inter_split_in_center():
    lhs = P(PADD, PADD, SIDE, SIDE)
    rhs_lat = P(PADD, PADD + SIDE // 4, SIDE, PADD)
    rhs_lon = P(PADD + SIDE // 4, PADD, PADD, SIDE)
    rhs_mid = P(PADD + SIDE // 4, PADD + SIDE // 4, PADD, PADD)

    lat = lhs.subtract(rhs_lat)
    lon = lhs.subtract(rhs_lon)
    assert lat == [
        P(PADD, PADD, SIDE, SIDE // 4),
        P(PADD, PADD + SIDE // 4 * 3, SIDE, SIDE // 4),
    ]
    assert lon == [
        P(PADD, PADD, SIDE // 4, SIDE),
        P(PADD + SIDE // 4 * 3, PADD, SIDE // 4, SIDE),
    ]
    assert lhs.subtract(rhs_mid) == lat + lon


def test_bound_avoid_in_center():
    lhs = P(PADD, PADD, SIDE, SIDE)
    rhs_n = P(0, PADD + SIDE + 1, PADD * 2 + SIDE, PADD - 1)
    rhs_s = P(0, 0, PADD * 2 + SIDE, PADD - 1)
    rhs_e = P(PADD + SIDE + 1, 0, PADD - 1, PADD * 2 + SIDE)
    rhs_w = P(0, 0, PADD - 1, PADD * 2 + SIDE)

    assert not lhs.overlaps(rhs_n)
    assert not lhs.overlaps(rhs_s)
    assert not lhs.overlaps(rhs_e)
    assert not lhs.overlaps(rhs_w)

    arr = [rhs_n, rhs_s, rhs_e, rhs_w]
    result = []
    for i in range(len(arr)):
        arr = arr[i:] + arr[:i]
        item = arr[0]
        for other in arr[1:]:
            if other.overlaps(item):
                result.extend(item.subtract(other))

    cut = PADD - 1
    assert result == [
        P(rhs_n.x, rhs_n.y, rhs_n.w - cut, rhs_n.h),
        P(rhs_n.x + cut, rhs_n.y, rhs_n.w - cut, rhs_n.h),
        P(rhs_s.x, rhs_s.y, rhs_s.w - cut, rhs_s.h),
        P(rhs_s.x + cut, rhs_s.y, rhs_s.w - cut, rhs_s.h),
        P(rhs_w.x, rhs_w.y, rhs_w.w, rhs_w.h - cut),
        P(rhs_w.x, rhs_w.y + cut, rhs_w.w, rhs_w.h - cut),
        P(rhs_e.x, rhs_e.y, rhs_e.w, rhs_e.h - cut),
        P(rhs_e.x, rhs_e.y + cut, rhs_e.w, rhs_e.h - cut),
    ]


def test_splits_absent_when_not_applicable():
    lhs = P(0, 0, SIDE, SIDE)
    assert lhs.split_n(lhs) is None
    assert lhs.split_s(lhs) is None
    assert lhs.split_e(lhs) is None
    assert lhs.split_w(lhs) is None


def test_placement_ordering_is_y_then_x():
    items = [P(5, 1, 1, 1), P(0, 2, 1, 1), P(3, 0, 1, 1)]
    assert sorted(items) == [P(3, 0, 1, 1), P(5, 1, 1, 1), P(0, 2, 1, 1)]


def test_placement_area_delegates_to_item():
    group = RectGroup([P(0, 0, 4, 4), P(4, 0, 2, 2)])
    placed = Placement(3, 3, group)
    assert placed.area() == 24
    assert placed.fill_area() == 20
    assert (placed.w, placed.h) == (6, 4)


def test_placed_rects_are_absolute():
    group = RectGroup([P(0, 0, 4, 4), P(4, 0, 2, 2)])
    placed = Placement(10, 20, group)
    assert list(placed.placed_rects()) == [P(10, 20, 4, 4), P(14, 20, 2, 2)]


def test_combine_beside_and_below():
    group = RectGroup([P(0, 0, SIDE, SIDE)])
    beside, below = group.combine(group)
    assert beside.rects == (P(0, 0, SIDE, SIDE), P(SIDE, 0, SIDE, SIDE))
    assert (beside.w, beside.h) == (16, 8)
    assert below.rects == (P(0, 0, SIDE, SIDE), P(0, SIDE, SIDE, SIDE))
    assert (below.w, below.h) == (8, 16)


@pytest.mark.parametrize(
    "avg_high, expected",
    [(2.5, 39), (2.4, 38), (0.0, 36), (float("nan"), 36), (-3.0, 36)],
)
def test_score(avg_high, expected):
    space = P(0, 0, 10, 10)
    group = RectGroup([P(0, 0, 8, 8)])
    assert group.score(space, avg_high) == expected


def test_groups_are_hashable_and_comparable():
    a = RectGroup([P(0, 0, 2, 2)])
    b = RectGroup([P(0, 0, 2, 2)])
    assert a == b
    assert len({a, b}) == 1
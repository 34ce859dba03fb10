import pytest

from matte_maker.document.model import BoxId
from matte_maker.layout.geometry import (
    BUFFER_SIZE,
    GUTTER,
    LAYOUT_HEIGHT,
    MATTE_FULL_HEIGHT,
    MATTE_WIDTH,
    CutInstruction,
    Edge,
    Rect,
    TemplateError,
    aspect,
    cut_rect,
    partition,
    pct,
    round_half_up,
)


def test_round_half_up():
    assert round_half_up(782.5) == 783
    assert round_half_up(2023.56) == 2024
    assert round_half_up(942.2432) == 942
    # Python's round() would give 2 here.
    assert round_half_up(2.5) == 3


def test_no_cuts_yields_whole_layout():
    assert partition([]) == [(BoxId.BOX1, Rect(0, 0, MATTE_WIDTH, LAYOUT_HEIGHT))]
    assert partition([], top_buffer=True) == [(BoxId.BOX1, Rect(0, BUFFER_SIZE, MATTE_WIDTH, LAYOUT_HEIGHT))]


def test_right_five_boxes_worked_example():
    cuts = [
        CutInstruction(0, Edge.RIGHT, pct(0.4818)),
        CutInstruction(1, Edge.TOP, pct(0.4891)),
        CutInstruction(2, Edge.LEFT, pct(0.4432)),
        CutInstruction(3, Edge.TOP, pct(0.48)),
    ]
    boxes = dict(partition(cuts))

    assert boxes == {
        BoxId.BOX1: Rect(2176, 0, 2024, 3130),
        BoxId.BOX2: Rect(0, 0, 2126, 1531),
        BoxId.BOX3: Rect(0, 1581, 942, 1549),
        BoxId.BOX4: Rect(992, 1581, 1134, 744),
        BoxId.BOX5: Rect(992, 2375, 1134, 755),
    }
    # primary + gutter + remainder spans the parent
    assert boxes[BoxId.BOX1].width + GUTTER + boxes[BoxId.BOX2].width == MATTE_WIDTH


def test_ids_follow_list_position():
    cuts = [CutInstruction(0, Edge.LEFT, pct(0.5)), CutInstruction(0, Edge.TOP, pct(0.5))]
    ids = [box for box, _ in partition(cuts)]
    assert ids == [BoxId.BOX1, BoxId.BOX2, BoxId.BOX3]


def test_bottom_cut_anchors_primary_at_box_bottom():
    (_, primary), (_, rest) = partition([CutInstruction(0, Edge.BOTTOM, pct(0.25))])
    assert primary == Rect(0, 3130 - 783, 4200, 783)
    assert rest == Rect(0, 0, 4200, 3130 - 783 - GUTTER)


def test_bottom_cut_respects_top_buffer():
    (_, primary), (_, rest) = partition([CutInstruction(0, Edge.BOTTOM, pct(0.25))], top_buffer=True)
    assert primary.y2 == MATTE_FULL_HEIGHT
    assert rest.y == BUFFER_SIZE
    assert rest.y2 + GUTTER == primary.y


def test_top_cut_is_horizontal():
    (_, primary), (_, rest) = partition([CutInstruction(0, Edge.TOP, pct(0.5))])
    assert primary == Rect(0, 0, 4200, 1565)
    assert rest == Rect(0, 1615, 4200, 1515)


def test_aspect_cut_left_derives_width_from_height():
    primary, rest = cut_rect(Rect(0, 0, 4200, 3130), CutInstruction(0, Edge.LEFT, aspect(0.5)))
    assert primary == Rect(0, 0, 1565, 3130)
    assert rest == Rect(1615, 0, 2585, 3130)


def test_aspect_cut_top_derives_height_from_width():
    primary, rest = cut_rect(Rect(0, 0, 4200, 3130), CutInstruction(0, Edge.TOP, aspect(4.2)))
    assert primary == Rect(0, 0, 4200, 1000)
    assert rest == Rect(0, 1050, 4200, 2080)


def test_target_out_of_range():
    with pytest.raises(TemplateError):
        partition([CutInstruction(1, Edge.LEFT, pct(0.5))])
    with pytest.raises(TemplateError):
        partition([CutInstruction(-1, Edge.LEFT, pct(0.5))])


@pytest.mark.parametrize("value", [0.0, 1.0, -0.2, 1.5])
def test_pct_outside_open_interval(value):
    with pytest.raises(TemplateError):
        partition([CutInstruction(0, Edge.LEFT, pct(value))])


def test_aspect_too_wide_leaves_no_remainder():
    with pytest.raises(TemplateError):
        partition([CutInstruction(0, Edge.LEFT, aspect(1.5))])


def test_non_positive_aspect():
    with pytest.raises(TemplateError):
        partition([CutInstruction(0, Edge.TOP, aspect(0))])


def test_pct_leaving_only_gutter():
    # 0.995 * 4200 = 4179, remainder 4200 - 4179 - 50 < 0
    with pytest.raises(TemplateError):
        partition([CutInstruction(0, Edge.LEFT, pct(0.995))])


def test_more_than_seven_boxes():
    cuts = [CutInstruction(i, Edge.TOP, pct(0.1)) for i in range(7)]
    with pytest.raises(TemplateError):
        partition(cuts)


def test_rect_overlap():
    a = Rect(0, 0, 10, 10)
    assert a.overlaps(Rect(5, 5, 10, 10))
    assert not a.overlaps(Rect(10, 0, 10, 10))
    assert not a.overlaps(Rect(0, 60, 10, 10))

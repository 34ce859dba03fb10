from __future__ import annotations

import os
from pathlib import Path

import pytest

from matte_maker.document.config_io import to_config_dict
from matte_maker.document.model import BoxId, ConfigFormatError, CropRect, Document, Position
from matte_maker.layout.geometry import Rect
from matte_maker.ops import document_ops as ops
from matte_maker.render.fonts import FontChoice

RIGHT_5 = 5
LEFT_5 = 2


def _doc_with_image(path: str = "/p/a.jpg") -> Document:
    doc = ops.select_template(ops.new_document(), RIGHT_5)
    return ops.assign_image(doc, BoxId.BOX1, path, CropRect(0, 0, 100, 150))


def test_new_document_defaults():
    doc = ops.new_document()
    assert doc.template_index == 0
    assert dict(doc.regions) == {}
    assert (doc.css_font_family, doc.im_font_name) == ("Arial", "Arial-Bold")
    assert doc.save_file is None


def test_new_document_with_font():
    doc = ops.new_document(FontChoice("DejaVu Sans", "DejaVu-Sans-Bold"))
    assert doc.im_font_name == "DejaVu-Sans-Bold"


def test_document_regions_are_read_only():
    doc = _doc_with_image()
    with pytest.raises(TypeError):
        doc.regions[BoxId.BOX2] = doc.regions[BoxId.BOX1]  # type: ignore[index]


def test_select_template_clears_regions():
    doc = ops.select_template(_doc_with_image(), 0)
    assert doc.template_index == 0
    assert dict(doc.regions) == {}


def test_select_unknown_template():
    with pytest.raises(IndexError):
        ops.select_template(ops.new_document(), 42)


def test_assign_image_takes_box_geometry():
    region = _doc_with_image().regions[BoxId.BOX1]
    assert (region.width, region.height) == (2024, 3130)
    assert region.position == Position(top=0, left=2176)
    assert region.path == "/p/a.jpg"
    assert region.crop == CropRect(0, 0, 100, 150)


def test_assign_image_relative_to_save_file(tmp_path: Path) -> None:
    img = tmp_path / "imgs" / "a.jpg"
    img.parent.mkdir()
    img.write_bytes(b"")
    doc = ops.select_template(Document(save_file=str(tmp_path / "m.json")), RIGHT_5)

    doc = ops.assign_image(doc, BoxId.BOX2, str(img), None)

    assert doc.regions[BoxId.BOX2].path == os.path.join("imgs", "a.jpg")


def test_assign_to_box_outside_template():
    doc = ops.select_template(ops.new_document(), LEFT_5)
    with pytest.raises(KeyError):
        ops.assign_image(doc, BoxId.BOX6, "/p/a.jpg", None)


def test_box_rect():
    doc = ops.select_template(ops.new_document(), RIGHT_5)
    assert ops.box_rect(doc, BoxId.BOX5) == Rect(992, 2375, 1134, 755)


def test_update_crop_and_caption():
    doc = ops.update_crop(_doc_with_image(), BoxId.BOX1, CropRect(5, 5, 50, 75))
    doc = ops.set_caption(doc, BoxId.BOX1, "Summer")
    region = doc.regions[BoxId.BOX1]
    assert region.crop == CropRect(5, 5, 50, 75)
    assert region.caption == "Summer"


def test_edits_on_empty_box():
    doc = _doc_with_image()
    with pytest.raises(KeyError):
        ops.update_crop(doc, BoxId.BOX2, CropRect(0, 0, 1, 1))
    with pytest.raises(KeyError):
        ops.set_caption(doc, BoxId.BOX2, "x")


def test_remove_image():
    doc = _doc_with_image()
    assert BoxId.BOX1 not in ops.remove_image(doc, BoxId.BOX1).regions
    assert ops.remove_image(doc, BoxId.BOX3) is doc


def test_transitions_do_not_mutate():
    doc = _doc_with_image()
    ops.remove_image(doc, BoxId.BOX1)
    ops.set_caption(doc, BoxId.BOX1, "changed")
    assert doc.regions[BoxId.BOX1].caption is None


def test_renderable_and_pending():
    doc = _doc_with_image()
    doc = ops.assign_image(doc, BoxId.BOX3, "/p/c.jpg", None)
    assert [box for box, _ in ops.renderable_regions(doc)] == [BoxId.BOX1]
    assert ops.pending_regions(doc) == [BoxId.BOX3]


def test_rebase_save_file(tmp_path: Path) -> None:
    img = tmp_path / "a" / "x.jpg"
    img.parent.mkdir()
    img.write_bytes(b"")
    (tmp_path / "b").mkdir()
    doc = ops.select_template(Document(save_file=str(tmp_path / "a" / "m.json")), RIGHT_5)
    doc = ops.assign_image(doc, BoxId.BOX1, str(img), None)
    assert doc.regions[BoxId.BOX1].path == "x.jpg"

    moved = ops.rebase_save_file(doc, str(tmp_path / "b" / "m.json"))

    assert moved.save_file == str(tmp_path / "b" / "m.json")
    assert moved.regions[BoxId.BOX1].path == os.path.join("..", "a", "x.jpg")


def test_document_from_config_round_trip():
    doc = _doc_with_image()
    back = ops.document_from_config(to_config_dict(doc, saved_at="2024-01-01T00:00:00.000Z"))
    assert back.regions == doc.regions
    assert back.template_index == RIGHT_5


def test_document_from_config_unknown_template():
    raw = to_config_dict(ops.new_document())
    raw["curTemplate"] = 99
    with pytest.raises(ConfigFormatError):
        ops.document_from_config(raw)


def test_document_from_config_stray_region():
    raw = to_config_dict(_doc_with_image())
    raw["curTemplate"] = LEFT_5
    raw["metrics"]["box6"] = raw["metrics"]["box1"]
    with pytest.raises(ConfigFormatError):
        ops.document_from_config(raw)

from matte_maker.document.migrations import (
    CURRENT_VERSION,
    MIGRATIONS,
    _upgrade_font_fields,
    bold_font_name,
    migrate_settings,
)


def test_bold_font_name():
    assert bold_font_name("Times New Roman") == "TimesNewRoman-Bold"
    assert bold_font_name("Arial") == "Arial-Bold"


def test_v1_font_family_is_split():
    out = migrate_settings({"version": 1, "fontFamily": "Times New Roman", "curTemplate": 2})
    assert out["version"] == CURRENT_VERSION
    assert out["cssFontFamily"] == "Times New Roman"
    assert out["imFontName"] == "TimesNewRoman-Bold"
    assert "fontFamily" not in out
    assert out["curTemplate"] == 2


def test_current_version_is_unchanged():
    doc = {
        "version": CURRENT_VERSION,
        "cssFontFamily": "DejaVu Sans",
        "imFontName": "DejaVu-Sans-Bold",
        "metrics": {},
    }
    assert migrate_settings(doc) == doc


def test_missing_version_gets_default_fonts():
    out = migrate_settings({"curTemplate": 0})
    assert out["version"] == CURRENT_VERSION
    assert out["cssFontFamily"] == "Arial"
    assert out["imFontName"] == "Arial-Bold"


def test_null_version_with_legacy_font():
    out = migrate_settings({"version": None, "fontFamily": "Open Sans"})
    assert out["version"] == CURRENT_VERSION
    assert out["imFontName"] == "OpenSans-Bold"


def test_future_version_passes_through():
    doc = {"version": CURRENT_VERSION + 3, "whatever": 1}
    assert migrate_settings(doc) == doc


def test_non_integer_version_is_left_alone():
    doc = {"version": "2", "fontFamily": "Arial"}
    assert migrate_settings(doc) == doc


def test_input_is_not_mutated():
    doc = {"version": 1, "fontFamily": "Arial", "metrics": {"box1": {"path": "a.jpg"}}}
    migrate_settings(doc)
    assert doc == {"version": 1, "fontFamily": "Arial", "metrics": {"box1": {"path": "a.jpg"}}}


def test_font_step_keeps_existing_fields():
    settings = {"cssFontFamily": "Georgia"}
    _upgrade_font_fields(settings)
    assert settings == {"cssFontFamily": "Georgia", "imFontName": "Georgia-Bold"}


def test_steps_are_listed_in_order():
    versions = [v for v, _ in MIGRATIONS]
    assert versions[0] is None
    assert versions[1:] == sorted(versions[1:])

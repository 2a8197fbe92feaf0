from dataclasses import fields

import pytest

from leftwm.theme_config import (
    Gutter,
    Margins,
    Side,
    ThemeConfig,
    load_theme_file,
    margins_from_custom,
)

TOML_THEME = """
border_width = 0
default_width = 400
default_height = 400
always_float = true
margin = 5
workspace_margin = 5
default_border_color = '#222222'
floating_border_color = '#005500'
focused_border_color = '#FFB53A'
background_color = '#333333'
on_new_window = 'echo Hello World'

[[gutter]]
side = "Top"
value = 0
"""

RON_THEME = """
(
    border_width: Some(0),
    default_width: Some(400),
    default_height: Some(400),
    always_float: Some(true),
    margin: Some(5),
    workspace_margin: Some(5),
    default_border_color: Some("#222222"),
    floating_border_color: Some("#005500"),
    focused_border_color: Some("#FFB53A"),
    background_color: Some("#333333"),
    on_new_window: Some("echo Hello World"),

    gutter: Some([Gutter (
        side: Top,
        value: 0,
        )]
    )
)"""

EXPECTED = ThemeConfig(
    border_width=0,
    margin=5,
    workspace_margin=5,
    default_width=400,
    default_height=400,
    always_float=True,
    gutter=[Gutter(side=Side.Top, value=0, id=None)],
    default_border_color="#222222",
    floating_border_color="#005500",
    focused_border_color="#FFB53A",
    background_color="#333333",
    on_new_window_cmd="echo Hello World",
)


def test_deserialize_custom_theme_config_toml(tmp_path):
    path = tmp_path / "theme.toml"
    path.write_text(TOML_THEME)
    assert load_theme_file(path) == EXPECTED


def test_deserialize_custom_theme_config_ron(tmp_path):
    path = tmp_path / "theme.ron"
    path.write_text(RON_THEME)
    assert load_theme_file(path) == EXPECTED


def test_defaults():
    theme = ThemeConfig()
    assert theme.border_width == 1
    assert theme.margin == 10
    assert theme.workspace_margin == 10
    assert (theme.default_width, theme.default_height) == (1000, 700)
    assert theme.always_float is False
    assert theme.gutter is None
    assert theme.focused_border_color == "#FF0000"
    assert theme.background_color == "#333333"


def test_missing_keys_are_none():
    theme = ThemeConfig.from_mapping({"unknown_key": 1})
    assert all(getattr(theme, f.name) is None for f in fields(theme))


def test_list_margin_is_kept():
    theme = ThemeConfig.from_mapping({"margin": [1, 2, 3, 4]})
    assert margins_from_custom(theme.margin) == Margins(1, 2, 3, 4)


@pytest.mark.parametrize(
    "data",
    [
        {"border_width": "1"},
        {"always_float": 1},
        {"margin": -1},
        {"margin": ["a"]},
        {"gutter": [{"side": "Middle", "value": 0}]},
        {"gutter": [{"side": "Top"}]},
        {"background_color": 5},
    ],
)
def test_invalid_values(data):
    with pytest.raises(ValueError):
        ThemeConfig.from_mapping(data)


def test_margins_from_custom():
    assert margins_from_custom(10) == Margins(10, 10, 10, 10)
    assert margins_from_custom([7]) == Margins.uniform(7)
    assert margins_from_custom([1, 2]) == Margins(top=1, right=2, bottom=1, left=2)
    assert margins_from_custom([1, 2, 3]) == Margins(top=1, right=2, bottom=3, left=2)
    assert margins_from_custom([1, 2, 3, 4]) == Margins(
        top=1, right=2, bottom=3, left=4
    )


def test_margins_from_custom_errors():
    with pytest.raises(ValueError, match="Empty margin or border array"):
        margins_from_custom([])
    with pytest.raises(ValueError, match="Too many entries in margin or border array"):
        margins_from_custom([1, 2, 3, 4, 5])


def test_load_replaces_settings(tmp_path):
    path = tmp_path / "theme.ron"
    path.write_text(RON_THEME)
    theme = ThemeConfig()
    assert theme.load(path) is True
    assert theme == EXPECTED


def test_load_failure_keeps_settings(tmp_path):
    theme = ThemeConfig()
    assert theme.load(tmp_path / "missing.ron") is False
    assert theme == ThemeConfig()
    broken = tmp_path / "broken.ron"
    broken.write_text("(border_width: ")
    assert theme.load(broken) is False
    assert theme == ThemeConfig()
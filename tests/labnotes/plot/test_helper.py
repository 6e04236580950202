from labnotes.plot.helper import merge_kwargs, get_category_colors
from labnotes.plot.default_styles import (
    DEFAULT_FIT_LINE_KWARGS,
    DEFAULT_CATEGORY_COLORS
)

def test_merge_kwargs():
    merged = merge_kwargs(DEFAULT_FIT_LINE_KWARGS, {"color":"blue", "ls":"--"})
    assert merged["color"] == "blue"
    assert merged["ls"] == "--"
    assert merged["lw"] == DEFAULT_FIT_LINE_KWARGS["lw"]

    # defaults untouched
    assert DEFAULT_FIT_LINE_KWARGS["color"] == "firebrick"
    assert merge_kwargs(DEFAULT_FIT_LINE_KWARGS, None) == DEFAULT_FIT_LINE_KWARGS

def test_get_category_colors():
    colors = get_category_colors(["Run", "Ride", "Run"])
    assert colors == {"Ride":DEFAULT_CATEGORY_COLORS[0],
                      "Run":DEFAULT_CATEGORY_COLORS[1]}

    cycled = get_category_colors(range(3), colors=["k", "r"])
    assert cycled == {0:"k", 1:"r", 2:"k"}

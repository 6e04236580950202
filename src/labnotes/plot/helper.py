from labnotes.plot.default_styles import DEFAULT_CATEGORY_COLORS

import copy

def merge_kwargs(defaults, overrides):
    """
    Deep copy of `defaults` updated with `overrides` (which may be None).
    """

    final = copy.deepcopy(defaults)
    if overrides is not None:
        for k in overrides:
            final[k] = overrides[k]

    return final


def get_category_colors(categories, colors=None):
    """
    Map each unique category (in sorted order) to a color, cycling through
    the default palette.
    """

    if colors is None:
        colors = DEFAULT_CATEGORY_COLORS

    unique = sorted(set(categories), key=str)

    return {c: colors[i % len(colors)] for i, c in enumerate(unique)}

#
#    Copyright (C) 2024-2025 The University of Sydney, Australia
#
#    This program is free software; you can redistribute it and/or modify it under
#    the terms of the GNU General Public License, version 2, as published by
#    the Free Software Foundation.
#
#    This program is distributed in the hope that it will be useful, but WITHOUT
#    ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or
#    FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License
#    for more details.
#
#    You should have received a copy of the GNU General Public License along
#    with this program; if not, write to Free Software Foundation, Inc.,
#    51 Franklin Street, Fifth Floor, Boston, MA  02110-1301, USA.
#

"""Named map themes.

A theme only describes how the map panel looks (background, graticule, border
and axis ticks). It is looked up by name when the map is drawn and applied to
that map's axes alone, so no global matplotlib state is touched.
"""

__all__ = [
    "DEFAULT_THEME",
    "Theme",
    "THEMES",
    "get_theme",
]

DEFAULT_THEME = "gray"


class Theme(object):
    """The look of a map panel.

    Parameters
    ----------
    name : str
    panel_color : str
        Background colour inside the map frame.
    grid_color : str or None
        Colour of the longitude/latitude graticule. None for no graticule.
    border_color : str or None
        Colour of the map frame. None hides the frame.
    show_ticks : bool
        Whether longitude/latitude tick labels are drawn along the frame.
    grid_linewidth : float
    """

    def __init__(
        self,
        name,
        panel_color,
        grid_color=None,
        border_color=None,
        show_ticks=True,
        grid_linewidth=0.5,
    ):
        self.name = name
        self.panel_color = panel_color
        self.grid_color = grid_color
        self.border_color = border_color
        self.show_ticks = show_ticks
        self.grid_linewidth = grid_linewidth

    def __repr__(self):
        return f"Theme({self.name!r})"


THEMES = {
    "gray": Theme("gray", panel_color="#ebebeb", grid_color="white"),
    "bw": Theme(
        "bw",
        panel_color="white",
        grid_color="#d9d9d9",
        border_color="#333333",
    ),
    "minimal": Theme(
        "minimal", panel_color="white", grid_color="#ebebeb", border_color=None
    ),
    "classic": Theme("classic", panel_color="white", border_color="black"),
    "void": Theme("void", panel_color="white", show_ticks=False),
}
THEMES["grey"] = THEMES["gray"]


def get_theme(name):
    """Return the :class:`Theme` registered under ``name``.

    Raises
    ------
    ValueError
        If there is no such theme.
    """
    try:
        return THEMES[name]
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown theme: {name!r}. Available themes: {sorted(THEMES)}."
        ) from None

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

"""Visual encodings of map layers.

A layer is drawn either with a constant style (:class:`ConstantStyle`) or with
its colours mapped from the discrete values of an attribute column
(:class:`AttributeStyle`). Both are immutable once created.
"""

import logging

import matplotlib
from matplotlib.colors import ListedColormap, is_color_like, to_hex

logger = logging.getLogger("mapcompose")

__all__ = [
    "ConstantStyle",
    "AttributeStyle",
]

DEFAULT_FILL = "#d9d9d9"
DEFAULT_COLOR = "#4d4d4d"
DEFAULT_CMAP = "tab10"
DEFAULT_NA_COLOR = "#7f7f7f"

# listed colormaps up to this size (tab10, Set1...) are used colour by colour, larger ones are sampled
QUALITATIVE_MAX_COLORS = 20

# sampled instead of a listed colormap which has fewer colours than there are values
FALLBACK_CMAP = "turbo"


class _Style(object):
    __slots__ = ()

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} objects are immutable.")

    def _init(self, **values):
        for name, value in values.items():
            object.__setattr__(self, name, value)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, s) == getattr(other, s) for s in self.__slots__)

    def __hash__(self):
        return hash(tuple(_hashable(getattr(self, s)) for s in self.__slots__))

    def __repr__(self):
        args = ", ".join(f"{s}={getattr(self, s)!r}" for s in self.__slots__)
        return f"{type(self).__name__}({args})"

    def plot_kwargs(self):
        """keyword arguments shared by every feature of the layer"""
        kwargs = {}
        if self.linewidth is not None:
            kwargs["linewidth"] = self.linewidth
        if self.alpha is not None:
            kwargs["alpha"] = self.alpha
        if self.markersize is not None:
            kwargs["markersize"] = self.markersize
        return kwargs


class ConstantStyle(_Style):
    """Draw every feature of a layer with the same colours.

    Parameters
    ----------
    fill : str, default="#d9d9d9"
        Fill colour of polygons. ``"none"`` leaves polygons hollow.
    color : str, default="#4d4d4d"
        Colour of polygon outlines, lines and points.
    linewidth : float, optional
    alpha : float, optional
    markersize : float, optional
        Size of point markers (in points^2).
    """

    __slots__ = ("fill", "color", "linewidth", "alpha", "markersize")

    def __init__(
        self,
        fill=DEFAULT_FILL,
        color=DEFAULT_COLOR,
        linewidth=None,
        alpha=None,
        markersize=None,
    ):
        for name, value in (("fill", fill), ("color", color)):
            if value is not None and not is_color_like(value):
                raise ValueError(f"Invalid {name} colour: {value!r}")
        self._init(
            fill=fill,
            color=color,
            linewidth=linewidth,
            alpha=alpha,
            markersize=markersize,
        )


class AttributeStyle(_Style):
    """Colour the features of a layer by the discrete values of an attribute column.

    Every distinct non-null value of ``column`` gets its own colour, taken from
    ``palette`` when it is a dict, or sampled from the matplotlib colormap named
    by ``palette`` otherwise. Values are ordered by sorting them.

    Parameters
    ----------
    column : str
        Name of the attribute column.
    palette : dict or str, default="tab10"
        ``{value: colour}`` mapping, or the name of a matplotlib colormap.
    legend : bool, default=True
        Whether the layer contributes entries to the map legend.
    title : str, optional
        Legend title. Defaults to the column name.
    na_color : str, default="#7f7f7f"
        Colour of features whose value is missing.
    color : str, optional
        Outline colour of polygons. By default polygons are outlined with their fill colour
        and points and lines are drawn with their mapped colour.
    linewidth : float, optional
    alpha : float, optional
    markersize : float, optional
    """

    __slots__ = (
        "column",
        "palette",
        "legend",
        "title",
        "na_color",
        "color",
        "linewidth",
        "alpha",
        "markersize",
    )

    def __init__(
        self,
        column,
        palette=DEFAULT_CMAP,
        legend=True,
        title=None,
        na_color=DEFAULT_NA_COLOR,
        color=None,
        linewidth=None,
        alpha=None,
        markersize=None,
    ):
        if not column:
            raise ValueError("An attribute-mapped style needs a column name.")
        if isinstance(palette, dict):
            for value, colour in palette.items():
                if not is_color_like(colour):
                    raise ValueError(f"Invalid colour {colour!r} for value {value!r}.")
            palette = dict(palette)
        elif palette not in matplotlib.colormaps:
            raise ValueError(f"Unknown colormap: {palette!r}")
        self._init(
            column=column,
            palette=palette,
            legend=bool(legend),
            title=title if title is not None else column,
            na_color=na_color,
            color=color,
            linewidth=linewidth,
            alpha=alpha,
            markersize=markersize,
        )

    def colors_for(self, values):
        """Return a ``{value: hex colour}`` dict for the (sorted) distinct ``values``.

        A listed colormap with fewer colours than there are values (``tab10`` with 12 values)
        is replaced by evenly spaced samples of ``turbo``, so every value keeps its own colour.

        Raises
        ------
        ValueError
            If ``palette`` is a dict which has no colour for one of the values.
        """
        if isinstance(self.palette, dict):
            missing = [v for v in values if v not in self.palette]
            if missing:
                raise ValueError(
                    f"The palette of column '{self.column}' has no colour for {missing}."
                )
            return {v: to_hex(self.palette[v]) for v in values}

        cmap = matplotlib.colormaps[self.palette]
        n = len(values)
        if isinstance(cmap, ListedColormap) and cmap.N <= QUALITATIVE_MAX_COLORS:
            if n <= cmap.N:
                return {v: to_hex(c) for v, c in zip(values, cmap.colors[:n])}
            logger.info(
                f"Colormap '{self.palette}' has {cmap.N} colours but column '{self.column}' "
                f"has {n} values. Using '{FALLBACK_CMAP}' instead."
            )
            cmap = matplotlib.colormaps[FALLBACK_CMAP]
        colors = [cmap(i / max(n - 1, 1)) for i in range(n)]
        return {v: to_hex(c) for v, c in zip(values, colors)}


def _hashable(value):
    if isinstance(value, dict):
        return tuple(sorted(value.items(), key=lambda kv: repr(kv[0])))
    return value

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

"""Cartographic decorations (scale bars and north arrows) placed at a corner of the map."""

import math

__all__ = [
    "Annotation",
    "SCALE_BAR",
    "NORTH_ARROW",
    "CORNERS",
    "nice_scale_length",
]

SCALE_BAR = "scale_bar"
NORTH_ARROW = "north_arrow"
ANNOTATION_KINDS = (SCALE_BAR, NORTH_ARROW)

CORNERS = ("top-left", "top-right", "bottom-left", "bottom-right")
_CORNER_ALIASES = {
    "tl": "top-left",
    "tr": "top-right",
    "bl": "bottom-left",
    "br": "bottom-right",
}

# inches per unit
_UNITS = {"in": 1.0, "cm": 1 / 2.54, "mm": 1 / 25.4}

_OPTIONS = {
    SCALE_BAR: ("length_km", "color"),
    NORTH_ARROW: ("size", "color"),
}


class Annotation(object):
    """A scale bar or north arrow anchored to a corner of the map.

    Parameters
    ----------
    kind : {"scale_bar", "north_arrow"}
    corner : {"top-left", "top-right", "bottom-left", "bottom-right"}
        The short forms "tl", "tr", "bl" and "br" are accepted too.
    pad_x, pad_y : float
        Distance from the corner to the annotation, towards the inside of the map.
    units : {"in", "cm", "mm"}, default="in"
        Units of ``pad_x`` and ``pad_y``.
    **options
        ``length_km`` (scale bar length; picked automatically when not given),
        ``size`` (north arrow height, in points) and ``color``.
    """

    def __init__(self, kind, corner, pad_x=0.1, pad_y=0.1, units="in", **options):
        if kind not in ANNOTATION_KINDS:
            raise ValueError(
                f"Unknown annotation kind: {kind!r}. Use one of {list(ANNOTATION_KINDS)}."
            )
        corner = _CORNER_ALIASES.get(corner, corner)
        if corner not in CORNERS:
            raise ValueError(
                f"Unknown anchor corner: {corner!r}. Use one of {list(CORNERS)}."
            )
        if units not in _UNITS:
            raise ValueError(f"Unknown units: {units!r}. Use one of {list(_UNITS)}.")
        unknown = set(options) - set(_OPTIONS[kind])
        if unknown:
            raise ValueError(f"Unexpected option(s) for {kind}: {sorted(unknown)}.")
        if pad_x < 0 or pad_y < 0:
            raise ValueError("Annotation padding must not be negative.")

        self._kind = kind
        self._corner = corner
        self._pad_x = float(pad_x) * _UNITS[units]
        self._pad_y = float(pad_y) * _UNITS[units]
        self._options = dict(options)

    @property
    def kind(self):
        return self._kind

    @property
    def corner(self):
        return self._corner

    @property
    def pad_x(self):
        """horizontal padding in inches"""
        return self._pad_x

    @property
    def pad_y(self):
        """vertical padding in inches"""
        return self._pad_y

    @property
    def options(self):
        return dict(self._options)

    def __eq__(self, other):
        if not isinstance(other, Annotation):
            return NotImplemented
        return (self._kind, self._corner, self._pad_x, self._pad_y, self._options) == (
            other._kind,
            other._corner,
            other._pad_x,
            other._pad_y,
            other._options,
        )

    def __hash__(self):
        return hash((self._kind, self._corner, self._pad_x, self._pad_y))

    def __repr__(self):
        return (
            f"Annotation({self._kind!r}, {self._corner!r}, "
            f"pad_x={self._pad_x:g}, pad_y={self._pad_y:g})"
        )


def nice_scale_length(max_km):
    """Return the largest 1, 2 or 5 x 10^k (km) not greater than ``max_km``."""
    if max_km <= 0:
        raise ValueError("The scale bar length must be positive.")
    exponent = math.floor(math.log10(max_km))
    for step in (5, 2, 1):
        length = step * 10**exponent
        if length <= max_km:
            return length
    return 10**exponent

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


class MapComposeError(Exception):
    """base class of all the exceptions raised by mapcompose"""


class DataLoadError(MapComposeError):
    """raise this exception when a vector dataset cannot be loaded."""

    def __init__(self, path, reason=None):
        self.path = path
        message = f"Unable to load vector data from '{path}'."
        if reason:
            message += f" {reason}"
        super().__init__(message)


class InvalidExtentError(MapComposeError):
    """raise this exception when a map extent is not a valid bounding box."""

    def __init__(self, min_lon, max_lon, min_lat, max_lat, reason=None):
        self.bounds = (min_lon, max_lon, min_lat, max_lat)
        message = (
            f"Invalid map extent (min_lon={min_lon}, max_lon={max_lon}, "
            f"min_lat={min_lat}, max_lat={max_lat})."
        )
        if reason:
            message += f" {reason}"
        super().__init__(message)


class RenderError(MapComposeError):
    """raise this exception when a map cannot be rendered or exported."""

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
from abc import ABC, abstractmethod

from geopandas.geodataframe import GeoDataFrame


class PlotEngine(ABC):
    """Abstract base class for map plotting.
    Do not use this base class directly. Use subclasses instead, such as :class:`CartopyPlotEngine`.
    """

    @abstractmethod
    def create_map(self, width, height, dpi):
        """Create a figure of ``width`` x ``height`` inches and the map axes on it (abstract method)"""
        pass  # This is an abstract method, no implementation here.

    @abstractmethod
    def set_extent(self, ax, extent):
        """Restrict the visible part of the map to a longitude/latitude extent (abstract method)"""
        pass  # This is an abstract method, no implementation here.

    @abstractmethod
    def plot_geo_data_frame(self, ax, gdf: GeoDataFrame, **kwargs):
        """Plot GeoPandas GeoDataFrame object (abstract method)"""
        pass  # This is an abstract method, no implementation here.

    @abstractmethod
    def apply_theme(self, ax, theme, extent):
        """Style the map panel with a theme (abstract method)"""
        pass  # This is an abstract method, no implementation here.

    @abstractmethod
    def set_labels(self, ax, title=None, x_label=None, y_label=None, show_axis_labels=True):
        """Draw the title and the axis labels (abstract method)"""
        pass  # This is an abstract method, no implementation here.

    @abstractmethod
    def add_legend(self, ax, entries, title=None):
        """Draw a legend from (label, colour, geometry family) entries (abstract method)"""
        pass  # This is an abstract method, no implementation here.

    @abstractmethod
    def add_scale_bar(self, ax, annotation, extent, zorder):
        """Draw a scale bar anchored to a corner of the map (abstract method)"""
        pass  # This is an abstract method, no implementation here.

    @abstractmethod
    def add_north_arrow(self, ax, annotation, zorder):
        """Draw a north arrow anchored to a corner of the map (abstract method)"""
        pass  # This is an abstract method, no implementation here.

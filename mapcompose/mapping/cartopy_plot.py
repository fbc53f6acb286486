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
import logging

import cartopy.crs as ccrs
import numpy as np
from cartopy.geodesic import Geodesic
from cartopy.mpl.ticker import LatitudeFormatter, LongitudeFormatter
from geopandas.geodataframe import GeoDataFrame
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.offsetbox import AnchoredOffsetbox, DrawingArea, TextArea, VPacker
from matplotlib.patches import Patch, Polygon
from matplotlib.ticker import MaxNLocator
from matplotlib.transforms import ScaledTranslation
from mpl_toolkits.axes_grid1.anchored_artists import AnchoredSizeBar

from ..annotations import nice_scale_length
from ..exceptions import RenderError
from .plot_engine import PlotEngine

logger = logging.getLogger("mapcompose")

DEFAULT_CARTOPY_PROJECTION = ccrs.PlateCarree()

GRID_ZORDER = 0.5
LEGEND_ZORDER = 90
LABEL_FONTSIZE = 8

# figure fraction kept free on the right for the legend
LEGEND_RIGHT_MARGIN = 0.75

# matplotlib location, axes anchor point, direction of the padding
_CORNER_ANCHORS = {
    "top-left": ("upper left", (0, 1), (1, -1)),
    "top-right": ("upper right", (1, 1), (-1, -1)),
    "bottom-left": ("lower left", (0, 0), (1, 1)),
    "bottom-right": ("lower right", (1, 0), (-1, 1)),
}


class CartopyPlotEngine(PlotEngine):
    """Use Cartopy for map plotting"""

    def __init__(self, projection=DEFAULT_CARTOPY_PROJECTION):
        self.projection = projection

    def create_map(self, width, height, dpi):
        """Create a figure and its Cartopy GeoAxes.

        The figure is a plain `matplotlib.figure.Figure`, it is not registered with pyplot.

        Parameters
        ----------
        width, height : float
            Size of the figure in inches.
        dpi : float
            Dots per inch used when the figure is rasterized.

        Returns
        -------
        fig : matplotlib.figure.Figure
        ax : cartopy.mpl.geoaxes.GeoAxes
        """
        fig = Figure(figsize=(width, height), dpi=dpi)
        ax = fig.add_subplot(1, 1, 1, projection=self.projection)
        return fig, ax

    def set_extent(self, ax, extent):
        ax.set_extent(extent.as_list(), crs=ccrs.PlateCarree())

    def plot_geo_data_frame(self, ax, gdf: GeoDataFrame, **kwargs):
        """Use Cartopy to plot geometries in a GeoDataFrame object onto a map

        Parameters
        ----------
        ax : cartopy.mpl.geoaxes.GeoAxes
            Cartopy GeoAxes instance
        gdf : GeoDataFrame
            GeoPandas GeoDataFrame object. Data without a CRS is taken to be longitude/latitude.

        """
        if hasattr(ax, "projection"):
            if gdf.crs is None:
                gdf = gdf.set_crs(epsg=4326)
            gdf = gdf.to_crs(ax.projection)
        else:
            kwargs["transform"] = ccrs.PlateCarree()

        # the aspect ratio is managed by the GeoAxes
        kwargs.setdefault("aspect", None)
        return gdf.plot(ax=ax, **kwargs)

    def apply_theme(self, ax, theme, extent):
        """Style the map panel: background, frame, graticule and longitude/latitude ticks.

        Parameters
        ----------
        ax : cartopy.mpl.geoaxes.GeoAxes
        theme : mapcompose.themes.Theme
        extent : mapcompose.map_spec.Extent
            The visible extent, used to place the graticule and the ticks.
        """
        ax.set_facecolor(theme.panel_color)
        for spine in ax.spines.values():
            if theme.border_color is None:
                spine.set_visible(False)
            else:
                spine.set_edgecolor(theme.border_color)

        xlocs, ylocs = graticule_locations(extent)
        if theme.grid_color is not None:
            ax.gridlines(
                crs=ccrs.PlateCarree(),
                xlocs=xlocs,
                ylocs=ylocs,
                color=theme.grid_color,
                linewidth=theme.grid_linewidth,
                draw_labels=False,
                zorder=GRID_ZORDER,
            )

        if theme.show_ticks:
            ax.set_xticks(xlocs, crs=ccrs.PlateCarree())
            ax.set_yticks(ylocs, crs=ccrs.PlateCarree())
            ax.xaxis.set_major_formatter(LongitudeFormatter())
            ax.yaxis.set_major_formatter(LatitudeFormatter())
            ax.xaxis.set_visible(True)
            ax.yaxis.set_visible(True)
            ax.tick_params(labelsize=LABEL_FONTSIZE, length=3)

    def set_labels(self, ax, title=None, x_label=None, y_label=None, show_axis_labels=True):
        if title is not None:
            ax.set_title(title)
        if not show_axis_labels:
            return
        if x_label is not None:
            ax.xaxis.set_visible(True)
            ax.set_xlabel(x_label)
        if y_label is not None:
            ax.yaxis.set_visible(True)
            ax.set_ylabel(y_label)

    def add_legend(self, ax, entries, title=None):
        """Draw a legend to the right of the map.

        Parameters
        ----------
        ax : cartopy.mpl.geoaxes.GeoAxes
        entries : list of (str, str, str)
            ``(label, colour, geometry family)`` triples. The family ("polygon", "line" or
            "point") decides whether a patch, a line or a marker is shown.
        title : str, optional

        Returns
        -------
        matplotlib.legend.Legend
        """
        handles = [_legend_handle(colour, family) for _, colour, family in entries]
        labels = [label for label, _, _ in entries]
        ax.figure.subplots_adjust(right=LEGEND_RIGHT_MARGIN)
        legend = ax.legend(
            handles=handles,
            labels=labels,
            title=title,
            loc="center left",
            bbox_to_anchor=(1.02, 0.5),
            frameon=False,
            fontsize=LABEL_FONTSIZE,
            title_fontsize=LABEL_FONTSIZE + 1,
        )
        legend.set_zorder(LEGEND_ZORDER)
        return legend

    def add_scale_bar(self, ax, annotation, extent, zorder):
        """Draw a scale bar with its length in kilometres.

        The bar is measured along the central latitude of ``extent``. Unless the annotation
        sets ``length_km``, the length is the largest 1, 2 or 5 x 10^k km that fits into a
        quarter of the map width.
        """
        lon = (extent.min_lon + extent.max_lon) / 2.0
        lat = (extent.min_lat + extent.max_lat) / 2.0
        km_per_degree = geodesic_km((lon, lat), (lon + 1.0, lat))
        if km_per_degree <= 0:
            raise RenderError(f"Unable to draw a scale bar at latitude {lat}.")

        options = annotation.options
        length_km = options.get("length_km")
        if length_km is None:
            length_km = nice_scale_length(extent.width * km_per_degree / 4.0)
        color = options.get("color", "black")

        loc, anchor, transform = _corner_anchor(ax, annotation)
        bar = AnchoredSizeBar(
            ax.transData,
            length_km / km_per_degree,
            f"{length_km:g} km",
            loc,
            pad=0,
            borderpad=0,
            sep=3,
            frameon=False,
            size_vertical=extent.height * 0.01,
            color=color,
            fill_bar=True,
            bbox_to_anchor=anchor,
            bbox_transform=transform,
        )
        bar.set_zorder(zorder)
        ax.add_artist(bar)
        logger.debug(f"Added a {length_km:g} km scale bar at {annotation.corner}.")
        return bar

    def add_north_arrow(self, ax, annotation, zorder):
        """Draw an arrow pointing to the top of the map, labelled "N".

        The annotation's ``size`` option is the arrow height in points (default 30).
        """
        options = annotation.options
        size = options.get("size", 30.0)
        color = options.get("color", "black")
        width = size * 0.6

        area = DrawingArea(width, size, 0, 0)
        area.add_artist(
            Polygon(
                [(0, 0), (width / 2.0, size), (width, 0), (width / 2.0, size * 0.3)],
                closed=True,
                facecolor=color,
                edgecolor=color,
            )
        )
        label = TextArea(
            "N", textprops=dict(color=color, fontsize=size * 0.4, fontweight="bold")
        )
        box = VPacker(children=[label, area], align="center", pad=0, sep=2)

        loc, anchor, transform = _corner_anchor(ax, annotation)
        arrow = AnchoredOffsetbox(
            loc,
            child=box,
            pad=0,
            borderpad=0,
            frameon=False,
            bbox_to_anchor=anchor,
            bbox_transform=transform,
        )
        arrow.set_zorder(zorder)
        ax.add_artist(arrow)
        logger.debug(f"Added a north arrow at {annotation.corner}.")
        return arrow


def graticule_locations(extent, nbins=5):
    """Return the longitudes and latitudes of the graticule lines and ticks inside ``extent``."""
    locator = MaxNLocator(nbins=nbins, steps=[1, 2, 2.5, 5, 10])
    xlocs = [
        x
        for x in locator.tick_values(extent.min_lon, extent.max_lon)
        if extent.min_lon <= x <= extent.max_lon
    ]
    ylocs = [
        y
        for y in locator.tick_values(extent.min_lat, extent.max_lat)
        if extent.min_lat <= y <= extent.max_lat and -90 <= y <= 90
    ]
    return xlocs, ylocs


def geodesic_km(start, end):
    """Distance in kilometres between two (lon, lat) points on the WGS84 ellipsoid."""
    result = np.asarray(Geodesic().inverse(start, end))
    return float(result.reshape(-1, 3)[0, 0]) / 1000.0


def _corner_anchor(ax, annotation):
    loc, anchor, (sx, sy) = _CORNER_ANCHORS[annotation.corner]
    offset = ScaledTranslation(
        sx * annotation.pad_x, sy * annotation.pad_y, ax.figure.dpi_scale_trans
    )
    return loc, anchor, ax.transAxes + offset


def _legend_handle(colour, family):
    if family == "point":
        return Line2D(
            [],
            [],
            linestyle="none",
            marker="o",
            markersize=6,
            markerfacecolor=colour,
            markeredgecolor=colour,
        )
    if family == "line":
        return Line2D([], [], color=colour, linewidth=1.5)
    return Patch(facecolor=colour, edgecolor="#4d4d4d", linewidth=0.5)

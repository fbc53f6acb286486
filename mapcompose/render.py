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

"""
Draw a :class:`MapSpec` and export it as a raster image.

The map is drawn in one pass: the layers bottom to top, the extent, the theme,
legend and labels, then the annotations, which always end up on top.
:func:`compose_figure` returns the `matplotlib.figure.Figure` so it can be
inspected; :func:`render` writes it to a file.

The image is first written to a temporary file next to the output path and
renamed over it once complete, so a failed render never leaves a partial file.
"""

import logging
import os
import tempfile

from .annotations import NORTH_ARROW, SCALE_BAR
from .decorators import append_docstring, validate_map_spec
from .exceptions import InvalidExtentError, MapComposeError, RenderError
from .map_spec import Extent
from .mapping.cartopy_plot import CartopyPlotEngine
from .mapping.plot_engine import PlotEngine
from .styles import AttributeStyle
from .themes import get_theme

logger = logging.getLogger("mapcompose")

__all__ = [
    "DEFAULT_DPI",
    "RASTER_FORMATS",
    "compose_figure",
    "render",
]

DEFAULT_DPI = 300

# file extension -> matplotlib format
RASTER_FORMATS = {
    ".png": "png",
    ".jpg": "jpg",
    ".jpeg": "jpg",
    ".tif": "tiff",
    ".tiff": "tiff",
}

LAYER_ZORDER_BASE = 1
ANNOTATION_ZORDER_BASE = 100

_GEOMETRY_FAMILIES = {
    "Polygon": "polygon",
    "MultiPolygon": "polygon",
    "LineString": "line",
    "MultiLineString": "line",
    "LinearRing": "line",
    "Point": "point",
    "MultiPoint": "point",
}

SIZE_DOCSTRING = """
width, height : float
    Size of the map in inches.
dpi : float, default=300
    Dots per inch. The image is ``width * dpi`` by ``height * dpi`` pixels.
plot_engine : :class:`PlotEngine`, default=CartopyPlotEngine()
"""


@validate_map_spec
@append_docstring(SIZE_DOCSTRING)
def compose_figure(
    map_spec, width, height, dpi=DEFAULT_DPI, plot_engine: PlotEngine = None
):
    """Draw a map and return its figure without saving it.

    Raises
    ------
    RenderError
        If the map has no layers, a required layer is empty, the size is not positive,
        or the plotting libraries fail while drawing (the original error is the cause).

    Parameters
    ----------
    map_spec : MapSpec"""
    _check_size(width, height, dpi)
    if plot_engine is None:
        plot_engine = CartopyPlotEngine()

    try:
        return _draw_map(map_spec, width, height, dpi, plot_engine)
    except MapComposeError:
        raise
    except Exception as err:
        # cartopy, geopandas and matplotlib each raise their own exception types
        raise RenderError(f"Unable to draw the map: {err}") from err


def _draw_map(map_spec, width, height, dpi, plot_engine):
    frames = [_layer_frame(layer) for layer in map_spec.layers]
    extent = map_spec.extent
    if extent is None:
        extent = _union_extent(frames)
        logger.debug(f"No extent was set. Fitting the map to {extent}.")

    fig, ax = plot_engine.create_map(width, height, dpi)
    plot_engine.set_extent(ax, extent)

    legend_entries, legend_titles = [], []
    for i, (layer, gdf) in enumerate(zip(map_spec.layers, frames)):
        if len(gdf) == 0 or gdf.geometry.is_empty.all():
            logger.info(f"Layer {layer.label or i} is empty. Skipped.")
            continue
        entries = _draw_layer(plot_engine, ax, layer, gdf, LAYER_ZORDER_BASE + i)
        if entries:
            legend_entries.extend(entries)
            legend_titles.append(layer.encoding.title)

    theme = get_theme(map_spec.theme)
    plot_engine.apply_theme(ax, theme, extent)
    # re-apply: setting ticks may widen the view
    plot_engine.set_extent(ax, extent)
    plot_engine.set_labels(
        ax,
        title=map_spec.title,
        x_label=map_spec.x_label,
        y_label=map_spec.y_label,
        show_axis_labels=theme.show_ticks,
    )
    if map_spec.legend and legend_entries:
        plot_engine.add_legend(ax, legend_entries, title=" / ".join(legend_titles))

    for i, annotation in enumerate(map_spec.annotations):
        zorder = ANNOTATION_ZORDER_BASE + i
        if annotation.kind == SCALE_BAR:
            plot_engine.add_scale_bar(ax, annotation, extent, zorder)
        elif annotation.kind == NORTH_ARROW:
            plot_engine.add_north_arrow(ax, annotation, zorder)

    return fig


@append_docstring(SIZE_DOCSTRING)
def render(
    map_spec,
    output_path,
    width,
    height,
    dpi=DEFAULT_DPI,
    plot_engine: PlotEngine = None,
):
    """Draw a map and save it as a raster image (PNG, JPEG or TIFF, chosen by the file extension).

    The file is written atomically: either the complete image is at ``output_path`` afterwards,
    or the call raises and ``output_path`` is left as it was.

    Returns
    -------
    str
        The output path.

    Raises
    ------
    RenderError
        If the map has no layers, a required layer is empty, the size is not positive,
        the extension is not a supported raster format, or the file cannot be written.

    Parameters
    ----------
    map_spec : MapSpec
    output_path : str or os.PathLike"""
    output_path = os.fspath(output_path)
    ext = os.path.splitext(output_path)[1].lower()
    if ext not in RASTER_FORMATS:
        raise RenderError(
            f"Unsupported raster format '{ext}'. Use one of {sorted(RASTER_FORMATS)}."
        )
    if os.path.isdir(output_path):
        raise RenderError(f"{output_path} is a directory.")

    fig = compose_figure(map_spec, width, height, dpi=dpi, plot_engine=plot_engine)
    _save_atomic(fig, output_path, RASTER_FORMATS[ext], dpi)
    logger.info(
        f"Saved {output_path} ({width} x {height} in, {dpi} dpi, {len(map_spec.layers)} layer(s))."
    )
    return output_path


def _check_size(width, height, dpi):
    for name, value in (("width", width), ("height", height), ("dpi", dpi)):
        try:
            positive = value > 0
        except TypeError:
            positive = False
        if not positive:
            raise RenderError(f"The map {name} must be a positive number, not {value!r}.")


def _save_atomic(fig, output_path, fmt, dpi):
    directory = os.path.dirname(os.path.abspath(output_path))
    try:
        fd, tmp_path = tempfile.mkstemp(
            prefix=".", suffix=os.path.splitext(output_path)[1], dir=directory
        )
    except OSError as err:
        raise RenderError(f"Unable to write to {output_path}: {err}") from err

    try:
        with os.fdopen(fd, "wb") as f:
            fig.savefig(f, format=fmt, dpi=dpi)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, output_path)
    except Exception as err:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise RenderError(f"Unable to save the map to {output_path}: {err}") from err


def _layer_frame(layer):
    if layer.collection.crs is None:
        logger.warning(
            f"Layer {layer.label} has no coordinate reference system. "
            "Assuming longitude/latitude."
        )
    return layer.collection.to_lonlat()


def _union_extent(frames):
    bounds = None
    for gdf in frames:
        geoms = gdf.geometry
        geoms = geoms[~(geoms.isna() | geoms.is_empty)]
        if len(geoms) == 0:
            continue
        minx, miny, maxx, maxy = geoms.total_bounds
        if bounds is None:
            bounds = [minx, miny, maxx, maxy]
        else:
            bounds = [
                min(bounds[0], minx),
                min(bounds[1], miny),
                max(bounds[2], maxx),
                max(bounds[3], maxy),
            ]
    if bounds is None:
        raise RenderError("None of the layers has any geometry.")
    try:
        return Extent.from_bounds([float(b) for b in bounds])
    except InvalidExtentError as err:
        raise RenderError(f"Unable to fit the map to the layers. {err}") from err


def _geometry_family_frames(gdf):
    families = gdf.geometry.geom_type.map(_GEOMETRY_FAMILIES)
    for family in ("polygon", "line", "point"):
        subset = gdf[families == family]
        if len(subset):
            yield family, subset


def _draw_layer(plot_engine, ax, layer, gdf, zorder):
    """Plot one layer and return its legend entries (empty for constant styles)."""
    encoding = layer.encoding
    common = encoding.plot_kwargs()
    common["zorder"] = zorder

    if not isinstance(encoding, AttributeStyle):
        for family, subset in _geometry_family_frames(gdf):
            kwargs = dict(common)
            if family == "polygon":
                kwargs["facecolor"] = encoding.fill if encoding.fill is not None else "none"
                kwargs["edgecolor"] = encoding.color if encoding.color is not None else "none"
            else:
                kwargs["color"] = encoding.color
            plot_engine.plot_geo_data_frame(ax, subset, **kwargs)
        return []

    values = sorted(gdf[encoding.column].dropna().unique())
    colors = encoding.colors_for(values)
    groups = [(v, gdf[gdf[encoding.column] == v], colors[v]) for v in values]
    missing = gdf[gdf[encoding.column].isna()]
    if len(missing):
        groups.append((None, missing, encoding.na_color))

    entries = []
    layer_families = set()
    for value, group, colour in groups:
        for family, subset in _geometry_family_frames(group):
            layer_families.add(family)
            kwargs = dict(common)
            if family == "polygon":
                kwargs["facecolor"] = colour
                kwargs["edgecolor"] = encoding.color if encoding.color is not None else colour
            else:
                kwargs["color"] = colour
            plot_engine.plot_geo_data_frame(ax, subset, **kwargs)

    if not encoding.legend:
        return []
    family = next(
        (f for f in ("polygon", "line", "point") if f in layer_families), "polygon"
    )
    for value, _, colour in groups:
        entries.append(("NA" if value is None else str(value), colour, family))
    return entries

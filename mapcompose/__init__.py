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
mapcompose: load vector datasets, compose them into layered maps and export static images.

.. code-block:: python
    :linenos:

    import mapcompose

    points = mapcompose.read_vector("data/boroughs_points.shp")
    spec = (
        mapcompose.MapBuilder()
        .add_layer(points, mapcompose.AttributeStyle("bcode"))
        .set_theme("bw")
        .set_labels(title="Boroughs")
        .add_annotation("north_arrow", "top-left", 0.2, 0.2)
        .build()
    )
    mapcompose.render(spec, "boroughs.png", 7, 7)
"""

from .utils import get_distribution_version
from .utils.log_utils import setup_logging

__version__ = get_distribution_version()

setup_logging()
del setup_logging

from .annotations import NORTH_ARROW, SCALE_BAR, Annotation
from .collection import GeometryCollection
from .exceptions import DataLoadError, InvalidExtentError, MapComposeError, RenderError
from .io import read_vector
from .map_spec import Extent, Layer, MapBuilder, MapSpec
from .mapping.cartopy_plot import CartopyPlotEngine
from .mapping.plot_engine import PlotEngine
from .render import DEFAULT_DPI, compose_figure, render
from .styles import AttributeStyle, ConstantStyle
from .themes import THEMES

__all__ = [
    # main classes
    "GeometryCollection",
    "MapBuilder",
    "MapSpec",
    # other classes
    "Annotation",
    "AttributeStyle",
    "ConstantStyle",
    "Extent",
    "Layer",
    "PlotEngine",
    "CartopyPlotEngine",
    # functions
    "read_vector",
    "compose_figure",
    "render",
    # exceptions
    "MapComposeError",
    "DataLoadError",
    "InvalidExtentError",
    "RenderError",
    # constants
    "DEFAULT_DPI",
    "NORTH_ARROW",
    "SCALE_BAR",
    "THEMES",
]

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
Read vector datasets into :class:`GeometryCollection` objects.

Files are read with `GeoPandas`, so any format the installed OGR driver stack
supports can be loaded. A shapefile is one logical dataset spread over several
sidecar files (``.shp``, ``.shx``, ``.dbf``, ``.prj``...). It can be named by
the path of its ``.shp`` file or by its base path without an extension.

Data which has already been loaded (a `geopandas.GeoDataFrame`, a
`geopandas.GeoSeries`, a `Shapely` geometry or a sequence of `Shapely`
geometries) is wrapped as it is.
"""

import logging
import os

import geopandas as gpd
from shapely.geometry.base import BaseGeometry

from .collection import GeometryCollection
from .exceptions import DataLoadError

logger = logging.getLogger("mapcompose")

SHAPEFILE_EXTENSION = ".shp"

__all__ = [
    "read_vector",
    "resolve_vector_path",
]


def read_vector(path, layer=None):
    """Read a vector dataset and return its features as a :class:`GeometryCollection`.

    Parameters
    ----------
    path : str, os.PathLike, geopandas.GeoDataFrame, geopandas.GeoSeries or shapely geometries
        Path to a vector file (or the base path of a shapefile), or data which
        has already been loaded.
    layer : str or int, optional
        The layer to read from multi-layer sources such as GeoPackages.

    Returns
    -------
    GeometryCollection
        One record per feature in the file, with every attribute column kept.

    Raises
    ------
    DataLoadError
        If the file is missing, unreadable or not a supported vector format.
    """
    collection = _wrap_loaded_data(path)
    if collection is not None:
        return collection

    filename = resolve_vector_path(path)
    kwargs = {}
    if layer is not None:
        kwargs["layer"] = layer
    try:
        gdf = gpd.read_file(filename, **kwargs)
    except Exception as err:
        # the reader raises a different exception type for each driver and failure
        raise DataLoadError(path, str(err)) from err

    if not isinstance(gdf, gpd.GeoDataFrame) or not _has_geometry(gdf):
        raise DataLoadError(path, "The file does not contain any geometry.")

    logger.info(f"Loaded {len(gdf)} feature(s) from {filename}.")
    if gdf.crs is None:
        logger.debug(f"{filename} has no coordinate reference system.")
    return GeometryCollection(gdf, source=str(filename))


def resolve_vector_path(path):
    """Return the file (or directory) to hand to the vector reader.

    A shapefile base path without an extension is resolved to its ``.shp``
    file. Raise :class:`DataLoadError` if nothing exists at the path.
    """
    try:
        filename = os.fspath(path)
    except TypeError as err:
        raise DataLoadError(path, "Expected a file path.") from err

    if os.path.exists(filename):
        return filename
    if not os.path.splitext(filename)[1]:
        shp = filename + SHAPEFILE_EXTENSION
        if os.path.isfile(shp):
            return shp
    raise DataLoadError(path, "The file does not exist.")


def _has_geometry(gdf):
    try:
        gdf.geometry
    except AttributeError:
        return False
    return True


def _wrap_loaded_data(data):
    if isinstance(data, gpd.GeoDataFrame):
        return GeometryCollection(data)
    if isinstance(data, gpd.GeoSeries):
        return GeometryCollection(gpd.GeoDataFrame(geometry=data, crs=data.crs))
    if isinstance(data, BaseGeometry):
        return GeometryCollection(gpd.GeoDataFrame(geometry=[data]))
    if isinstance(data, (str, bytes, os.PathLike)):
        return None
    try:
        geoms = list(data)
    except TypeError:
        # Not an iterable, let the path handling report it
        return None
    if geoms and all(isinstance(g, BaseGeometry) for g in geoms):
        return GeometryCollection(gpd.GeoDataFrame(geometry=geoms))
    return None

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

"""The in-memory vector dataset handed from the loader to the map layers.

A :class:`GeometryCollection` is an ordered sequence of Shapely geometries,
each with an attribute record (a mapping of column name to value). It wraps
a `geopandas.GeoDataFrame`_ which is copied on the way in and on the way out,
so a collection never changes after it has been constructed.

.. _geopandas.GeoDataFrame: https://geopandas.org/en/stable/docs/reference/api/geopandas.GeoDataFrame.html
"""

import geopandas as gpd
import numpy as np
import pandas as pd

__all__ = ["GeometryCollection"]


class GeometryCollection(object):
    """An immutable, ordered collection of geometries with attribute columns.

    .. code-block:: python
        :linenos:

        states = mapcompose.read_vector("data/us_states.shp")
        len(states)  # number of features
        geometry, attributes = states.record(0)

    """

    def __init__(self, gdf: gpd.GeoDataFrame, source=None):
        """Constructor. Wrap a copy of ``gdf``.

        Parameters
        ----------
        gdf : geopandas.GeoDataFrame
            The geometries and their attribute columns.
        source : str, optional
            Where the data came from (a file path). Used in log and error messages.
        """
        if not isinstance(gdf, gpd.GeoDataFrame):
            raise TypeError(
                f"A GeometryCollection wraps a geopandas.GeoDataFrame, not {type(gdf).__name__}."
            )
        self._gdf = gdf.copy().reset_index(drop=True)
        self._source = source

    @property
    def source(self):
        return self._source

    @property
    def crs(self):
        """The coordinate reference system (`pyproj.CRS`) of the geometries, or None if unknown."""
        return self._gdf.crs

    @property
    def columns(self):
        """Names of the attribute columns (the geometry column excluded)."""
        geometry_name = self._gdf.geometry.name
        return tuple(c for c in self._gdf.columns if c != geometry_name)

    @property
    def geometry_types(self):
        """The distinct geometry types in the collection, e.g. ``("MultiPolygon", "Polygon")``."""
        types = self._gdf.geometry.geom_type.dropna().unique()
        return tuple(sorted(str(t) for t in types))

    @property
    def bounds(self):
        """The total bounds ``(minx, miny, maxx, maxy)`` of all non-empty geometries, or None."""
        geoms = self._gdf.geometry
        geoms = geoms[~(geoms.isna() | geoms.is_empty)]
        if len(geoms) == 0:
            return None
        return tuple(float(v) for v in geoms.total_bounds)

    @property
    def is_empty(self):
        """True if there is no feature, or every feature has an empty geometry."""
        return self.bounds is None

    def __len__(self):
        return len(self._gdf)

    def __iter__(self):
        for i in range(len(self._gdf)):
            yield self.record(i)

    def __repr__(self):
        return (
            f"GeometryCollection(features={len(self)}, "
            f"geometry_types={list(self.geometry_types)}, source={self._source!r})"
        )

    def record(self, index):
        """Return the ``(geometry, attributes)`` pair of the feature at ``index``.

        ``attributes`` is a new dict each time; changing it does not change the collection.
        """
        row = self._gdf.iloc[index]
        attributes = {c: _to_python(row[c]) for c in self.columns}
        return row[self._gdf.geometry.name], attributes

    def unique(self, column):
        """Return the sorted distinct non-null values of an attribute column."""
        if column not in self.columns:
            raise ValueError(
                f"Column '{column}' does not exist. Available columns: {list(self.columns)}."
            )
        values = self._gdf[column].dropna().unique()
        return [_to_python(v) for v in sorted(values)]

    def to_geodataframe(self):
        """Return a copy of the underlying `geopandas.GeoDataFrame`_."""
        return self._gdf.copy()

    def to_lonlat(self):
        """Return a `geopandas.GeoDataFrame`_ copy in longitude/latitude (EPSG:4326).

        Data without a CRS is returned unchanged and is assumed to be longitude/latitude already.
        """
        if self._gdf.crs is None:
            return self._gdf.copy()
        return self._gdf.to_crs(epsg=4326)


def _to_python(value):
    # numpy scalars -> python scalars; missing values -> None
    if isinstance(value, np.generic):
        value = value.item()
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value

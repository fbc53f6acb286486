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

import argparse
import logging

from ..io import read_vector

logger = logging.getLogger("mapcompose")

help_str = "Show the feature count, geometry types, columns, bounds and CRS of a vector file."

__description__ = f"""{help_str}

Example usage: 
    - mapcompose info data/us_states.shp
    - mapcompose info data/us_states
"""


def add_parser(subparser):
    """add 'info' command line argument parser"""
    info_cmd = subparser.add_parser(
        "info",
        help=help_str,
        add_help=True,
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    info_cmd.set_defaults(func=run_info)
    info_cmd.add_argument("path", type=str, help="vector file, or shapefile base path")
    info_cmd.add_argument("--layer", type=str, default=None, dest="layer")


def run_info(args):
    collection = read_vector(args.path, layer=args.layer)
    print()
    print(f"Source: {collection.source}")
    print(f"Features: {len(collection)}")
    print(f"Geometry types: {', '.join(collection.geometry_types) or '-'}")
    print(f"CRS: {collection.crs.to_string() if collection.crs else 'unknown'}")
    bounds = collection.bounds
    if bounds:
        print("Bounds: minx={:g}, miny={:g}, maxx={:g}, maxy={:g}".format(*bounds))
    print("Columns:")
    for c in collection.columns:
        print(f"    {c}")
    print()

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
from ..map_spec import MapBuilder
from ..render import DEFAULT_DPI, render
from ..styles import AttributeStyle, ConstantStyle
from ..themes import THEMES

logger = logging.getLogger("mapcompose")

help_str = "Compose one or more vector files into a map and save it as a raster image."

__description__ = f"""{help_str}

Layers are drawn in the order they are given, the last one on top.
--fill, --color, --color-by and --optional apply to the preceding --layer.

Example usage: 
    - mapcompose render us.png --layer states.shp --fill white --layer countries.shp --fill none \\
          --extent -130.33 -50.77 24.32 52.54 --width 7 --height 9
    - mapcompose render boroughs.png --layer points.shp --color-by bcode --theme bw \\
          --north-arrow top-left --scale-bar bottom-left
"""


class _NewLayerAction(argparse.Action):
    def __call__(self, parser, namespace, values, option_string=None):
        layers = list(getattr(namespace, self.dest) or [])
        layers.append({"path": values})
        setattr(namespace, self.dest, layers)


class _LayerOptionAction(argparse.Action):
    """store the option on the most recent --layer"""

    def __init__(self, option_strings, dest, layer_key=None, **kwargs):
        self.layer_key = layer_key
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        layers = getattr(namespace, "layers", None)
        if not layers:
            parser.error(f"{option_string} must follow a --layer.")
        layers[-1][self.layer_key] = True if self.nargs == 0 else values


def add_parser(subparser):
    """add 'render' command line argument parser"""
    render_cmd = subparser.add_parser(
        "render",
        help=help_str,
        add_help=True,
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    render_cmd.set_defaults(func=run_render)
    render_cmd.add_argument("output", type=str, help="the image file (.png, .jpg or .tif)")
    render_cmd.add_argument(
        "--layer", dest="layers", action=_NewLayerAction, metavar="PATH", required=True
    )
    render_cmd.add_argument(
        "--fill", dest="_fill", action=_LayerOptionAction, layer_key="fill"
    )
    render_cmd.add_argument(
        "--color", dest="_color", action=_LayerOptionAction, layer_key="color"
    )
    render_cmd.add_argument(
        "--color-by",
        dest="_color_by",
        action=_LayerOptionAction,
        layer_key="color_by",
        metavar="COLUMN",
    )
    render_cmd.add_argument(
        "--optional",
        dest="_optional",
        action=_LayerOptionAction,
        layer_key="optional",
        nargs=0,
        help="do not fail if the layer is empty",
    )
    render_cmd.add_argument(
        "--extent",
        type=float,
        nargs=4,
        metavar=("MINLON", "MAXLON", "MINLAT", "MAXLAT"),
        default=None,
    )
    render_cmd.add_argument("--theme", choices=sorted(THEMES), default=None)
    render_cmd.add_argument("--title", type=str, default=None)
    render_cmd.add_argument("--xlabel", type=str, default=None)
    render_cmd.add_argument("--ylabel", type=str, default=None)
    render_cmd.add_argument("--no-legend", dest="legend", action="store_false")
    render_cmd.add_argument("--scale-bar", dest="scale_bar", metavar="CORNER", default=None)
    render_cmd.add_argument(
        "--north-arrow", dest="north_arrow", metavar="CORNER", default=None
    )
    render_cmd.add_argument(
        "--pad",
        type=float,
        nargs=2,
        metavar=("PAD_X", "PAD_Y"),
        default=(0.2, 0.2),
        help="annotation padding in inches",
    )
    render_cmd.add_argument("--width", type=float, default=7.0, help="inches")
    render_cmd.add_argument("--height", type=float, default=7.0, help="inches")
    render_cmd.add_argument("--dpi", type=float, default=DEFAULT_DPI)


def build_map_spec(args):
    """Turn the parsed command line arguments into a MapSpec."""
    builder = MapBuilder()
    for layer in args.layers:
        collection = read_vector(layer["path"])
        if layer.get("color_by"):
            encoding = AttributeStyle(layer["color_by"], color=layer.get("color"))
        else:
            kwargs = {k: layer[k] for k in ("fill", "color") if k in layer}
            encoding = ConstantStyle(**kwargs)
        builder.add_layer(
            collection,
            encoding,
            required=not layer.get("optional", False),
            label=layer["path"],
        )

    if args.extent:
        builder.set_extent(*args.extent)
    if args.theme:
        builder.set_theme(args.theme)
    builder.set_legend(args.legend)
    builder.set_labels(title=args.title, x_label=args.xlabel, y_label=args.ylabel)

    pad_x, pad_y = args.pad
    if args.scale_bar:
        builder.add_annotation("scale_bar", args.scale_bar, pad_x, pad_y)
    if args.north_arrow:
        builder.add_annotation("north_arrow", args.north_arrow, pad_x, pad_y)
    return builder.build()


def run_render(args):
    spec = build_map_spec(args)
    render(spec, args.output, args.width, args.height, dpi=args.dpi)
    print(f"Done! The map has been saved to {args.output}.")

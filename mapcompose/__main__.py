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
import sys

from mapcompose import __version__

from .commands import info, render_map
from .exceptions import MapComposeError


class ArgParser(argparse.ArgumentParser):
    def error(self, message):
        sys.stderr.write(f"error: {message}\n")
        self.print_help()
        sys.exit(1)


def main(argv=None):
    parser = ArgParser(prog="mapcompose")

    parser.add_argument("-v", "--version", action="store_true")

    # sub-commands
    subparser = parser.add_subparsers(
        dest="command",
        title="subcommands",
        description="valid subcommands",
    )
    # add "info" sub-command
    info.add_parser(subparser)

    # add "render" sub-command
    render_map.add_parser(subparser)

    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        parser.print_help(sys.stderr)
        sys.exit(1)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        sys.exit(0)

    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(1)

    try:
        args.func(args)
    except (MapComposeError, ValueError) as err:
        sys.stderr.write(f"error: {err}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()

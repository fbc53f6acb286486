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
from functools import wraps

from .exceptions import RenderError

logger = logging.getLogger("mapcompose")


def append_docstring(docstring_to_add):
    """append text to the end of the function's __doc__

    Parameters
    ----------
    docstring_to_add : str
        the text to append to the function's __doc__
    """

    def inner(func_pointer):
        if func_pointer.__doc__:
            func_pointer.__doc__ += docstring_to_add
        else:
            func_pointer.__doc__ = docstring_to_add

        @wraps(func_pointer)
        def wrapper(*args, **kwargs):
            return func_pointer(*args, **kwargs)

        return wrapper

    return inner


def validate_map_spec(func_pointer):
    """check that the map can be drawn before drawing it. If not, raise RenderError

    The decorated function takes the MapSpec as its first argument.
    """

    @wraps(func_pointer)
    def wrapper(map_spec, *args, **kwargs):
        if not map_spec.layers:
            raise RenderError("The map has no layers. Add at least one layer before rendering.")
        for i, layer in enumerate(map_spec.layers):
            if layer.required and layer.collection.is_empty:
                name = layer.label if layer.label else f"#{i}"
                raise RenderError(f"Layer {name} is required but has no geometry.")
        return func_pointer(map_spec, *args, **kwargs)

    return wrapper

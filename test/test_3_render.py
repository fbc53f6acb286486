import os

import geopandas as gpd
import matplotlib.image as mpimg
import numpy as np
import pytest
from matplotlib.figure import Figure
from shapely.geometry import Point, box

import mapcompose
from mapcompose import (
    CartopyPlotEngine,
    AttributeStyle,
    ConstantStyle,
    GeometryCollection,
    MapBuilder,
    RenderError,
)
from conftest import n_boroughs, test_dpi, us_states_extent

# ========================================= <mapcompose.render> =========================================

""" 
Automated tests of the exporter. Maps are composed from the conftest shapefiles and written to
temporary directories. The tests check the pixel size of the images, the drawing order of the
layers, that rendering is repeatable, the legend entries, and that failures raise <RenderError>
without leaving partial files behind.
"""


def _square(minx, miny, maxx, maxy):
    return GeometryCollection(
        gpd.GeoDataFrame(geometry=[box(minx, miny, maxx, maxy)], crs="EPSG:4326")
    )


@pytest.fixture(scope="module")
def us_states_spec(states, countries):
    return (
        MapBuilder()
        .add_layer(states, ConstantStyle(fill="white", color="grey"))
        .add_layer(countries, ConstantStyle(fill="none", color="black", linewidth=1.0))
        .set_extent(*us_states_extent)
        .set_theme("bw")
        .set_labels("US states", "Longitude", "Latitude")
        .add_annotation("scale_bar", "bottom-left", 0.2, 0.2)
        .add_annotation("north_arrow", "top-left", 0.2, 0.2)
        .build()
    )


@pytest.fixture(scope="module")
def boroughs_spec(borough_points):
    return (
        MapBuilder()
        .add_layer(borough_points, AttributeStyle("bcode", markersize=20))
        .set_legend(True)
        .build()
    )


def test_us_states_map(us_states_spec, tmp_path):
    path = os.path.join(tmp_path, "us_states.png")
    result = mapcompose.render(us_states_spec, path, 7, 9)
    assert result == path
    assert os.path.isfile(path)
    assert os.path.getsize(path) > 0
    image = mpimg.imread(path)
    # 7 x 9 inches at 300 dpi
    assert image.shape[:2] == (2700, 2100)


@pytest.mark.parametrize("ext", [".png", ".jpg", ".tif"])
def test_raster_formats(us_states_spec, tmp_path, ext):
    path = os.path.join(tmp_path, "map" + ext)
    mapcompose.render(us_states_spec, path, 2, 3, dpi=test_dpi)
    assert os.path.getsize(path) > 0


def test_render_is_repeatable(us_states_spec, tmp_path):
    path = os.path.join(tmp_path, "again.png")
    mapcompose.render(us_states_spec, path, 4, 4, dpi=test_dpi)
    with open(path, "rb") as f:
        first = f.read()
    mapcompose.render(us_states_spec, path, 4, 4, dpi=test_dpi)
    with open(path, "rb") as f:
        second = f.read()
    assert first == second


def test_later_layers_are_drawn_on_top(tmp_path):
    spec = (
        MapBuilder()
        .add_layer(_square(-20, -20, 20, 20), ConstantStyle(fill="red", color="red"))
        .add_layer(_square(-20, -20, 20, 20), ConstantStyle(fill="blue", color="blue"))
        .set_extent(-10, 10, -10, 10)
        .set_theme("void")
        .build()
    )
    path = os.path.join(tmp_path, "order.png")
    mapcompose.render(spec, path, 4, 4, dpi=test_dpi)
    image = mpimg.imread(path)
    h, w = image.shape[:2]
    np.testing.assert_allclose(image[h // 2, w // 2, :3], [0.0, 0.0, 1.0], atol=0.02)

    # swap the layers, red is on top now
    swapped = (
        MapBuilder()
        .add_layer(_square(-20, -20, 20, 20), ConstantStyle(fill="blue", color="blue"))
        .add_layer(_square(-20, -20, 20, 20), ConstantStyle(fill="red", color="red"))
        .set_extent(-10, 10, -10, 10)
        .set_theme("void")
        .build()
    )
    mapcompose.render(swapped, path, 4, 4, dpi=test_dpi)
    image = mpimg.imread(path)
    np.testing.assert_allclose(image[h // 2, w // 2, :3], [1.0, 0.0, 0.0], atol=0.02)


def test_legend_lists_every_category(boroughs_spec):
    fig = mapcompose.compose_figure(boroughs_spec, 5, 5, dpi=test_dpi)
    assert isinstance(fig, Figure)
    legend = fig.axes[0].get_legend()
    assert legend is not None
    labels = [t.get_text() for t in legend.get_texts()]
    assert len(labels) == n_boroughs
    assert labels == ["1", "2", "3", "4", "5"]
    assert legend.get_title().get_text() == "bcode"


def test_legend_can_be_hidden(borough_points):
    spec = (
        MapBuilder()
        .add_layer(borough_points, AttributeStyle("bcode"))
        .set_legend(False)
        .build()
    )
    fig = mapcompose.compose_figure(spec, 5, 5, dpi=test_dpi)
    assert fig.axes[0].get_legend() is None

    spec = MapBuilder().add_layer(borough_points, AttributeStyle("bcode", legend=False)).build()
    fig = mapcompose.compose_figure(spec, 5, 5, dpi=test_dpi)
    assert fig.axes[0].get_legend() is None


def test_missing_values_get_na_entry():
    gdf = gpd.GeoDataFrame(
        {"kind": ["a", "b", None]},
        geometry=[Point(0, 0), Point(1, 1), Point(2, 2)],
        crs="EPSG:4326",
    )
    spec = MapBuilder().add_layer(GeometryCollection(gdf), AttributeStyle("kind")).build()
    fig = mapcompose.compose_figure(spec, 4, 4, dpi=test_dpi)
    labels = [t.get_text() for t in fig.axes[0].get_legend().get_texts()]
    assert labels == ["a", "b", "NA"]


def test_constant_style_has_no_legend(states):
    spec = MapBuilder().add_layer(states).build()
    fig = mapcompose.compose_figure(spec, 4, 4, dpi=test_dpi)
    assert fig.axes[0].get_legend() is None


def test_labels(us_states_spec):
    fig = mapcompose.compose_figure(us_states_spec, 7, 9, dpi=test_dpi)
    ax = fig.axes[0]
    assert ax.get_title() == "US states"
    assert ax.get_xlabel() == "Longitude"
    assert ax.get_ylabel() == "Latitude"


def test_annotations_are_drawn_on_top(us_states_spec):
    from matplotlib.offsetbox import AnchoredOffsetbox
    from mpl_toolkits.axes_grid1.anchored_artists import AnchoredSizeBar

    fig = mapcompose.compose_figure(us_states_spec, 7, 9, dpi=test_dpi)
    ax = fig.axes[0]
    anchored = [a for a in ax.artists if isinstance(a, AnchoredOffsetbox)]
    assert len(anchored) == 2
    scale_bar, north_arrow = anchored
    assert isinstance(scale_bar, AnchoredSizeBar)
    assert scale_bar.txt_label.get_text().endswith(" km")
    assert scale_bar.get_zorder() < north_arrow.get_zorder()
    layer_zorders = [c.get_zorder() for c in ax.collections]
    assert max(layer_zorders) < scale_bar.get_zorder()


def test_scale_bar_length_option(states):
    spec = (
        MapBuilder()
        .add_layer(states)
        .add_annotation("scale_bar", "bottom-right", 0.1, 0.1, length_km=250)
        .build()
    )
    from mpl_toolkits.axes_grid1.anchored_artists import AnchoredSizeBar

    fig = mapcompose.compose_figure(spec, 5, 5, dpi=test_dpi)
    (scale_bar,) = [a for a in fig.axes[0].artists if isinstance(a, AnchoredSizeBar)]
    assert scale_bar.txt_label.get_text() == "250 km"


@pytest.mark.parametrize("theme", sorted(mapcompose.THEMES))
def test_themes(states, theme, tmp_path):
    spec = MapBuilder().add_layer(states).set_theme(theme).set_labels("t", "x", "y").build()
    path = os.path.join(tmp_path, f"{theme}.png")
    mapcompose.render(spec, path, 3, 3, dpi=test_dpi)
    assert os.path.getsize(path) > 0


def test_extent_is_applied(states):
    spec = MapBuilder().add_layer(states).set_extent(*us_states_extent).build()
    fig = mapcompose.compose_figure(spec, 7, 9, dpi=test_dpi)
    extent = fig.axes[0].get_extent(crs=mapcompose.CartopyPlotEngine().projection)
    assert extent == pytest.approx(us_states_extent, abs=1e-3)


def test_extent_defaults_to_union_of_layers(states, countries):
    spec = MapBuilder().add_layer(states).add_layer(countries).build()
    fig = mapcompose.compose_figure(spec, 7, 7, dpi=test_dpi)
    extent = fig.axes[0].get_extent(crs=mapcompose.CartopyPlotEngine().projection)
    assert extent == pytest.approx((-141.0, -52.0, 14.5, 70.0), abs=1e-3)


def test_projected_layer_is_reprojected(projected_points_shp, borough_points):
    projected = mapcompose.read_vector(projected_points_shp)
    spec = MapBuilder().add_layer(projected).build()
    fig = mapcompose.compose_figure(spec, 5, 5, dpi=test_dpi)
    extent = fig.axes[0].get_extent(crs=mapcompose.CartopyPlotEngine().projection)
    minx, miny, maxx, maxy = borough_points.bounds
    assert extent == pytest.approx((minx, maxx, miny, maxy), abs=1e-3)


def test_layer_outside_extent_is_kept(states, tmp_path):
    spec = (
        MapBuilder()
        .add_layer(states)
        .add_layer(_square(100, -10, 110, 0))
        .set_extent(*us_states_extent)
        .build()
    )
    assert len(spec.layers) == 2
    path = os.path.join(tmp_path, "outside.png")
    mapcompose.render(spec, path, 3, 3, dpi=test_dpi)
    assert os.path.getsize(path) > 0


def test_layer_without_crs(tmp_path):
    gdf = gpd.GeoDataFrame(geometry=[box(0, 0, 10, 10)])
    spec = MapBuilder().add_layer(GeometryCollection(gdf)).build()
    path = os.path.join(tmp_path, "no_crs.png")
    mapcompose.render(spec, path, 3, 3, dpi=test_dpi)
    assert os.path.getsize(path) > 0


def test_no_layers(tmp_path):
    path = os.path.join(tmp_path, "empty.png")
    with pytest.raises(RenderError):
        mapcompose.render(MapBuilder().build(), path, 7, 9)
    assert not os.path.exists(path)


def test_empty_required_layer(states, tmp_path):
    empty = GeometryCollection(gpd.GeoDataFrame(geometry=[], crs="EPSG:4326"))
    spec = MapBuilder().add_layer(states).add_layer(empty).build()
    path = os.path.join(tmp_path, "empty_layer.png")
    with pytest.raises(RenderError):
        mapcompose.render(spec, path, 3, 3, dpi=test_dpi)
    assert not os.path.exists(path)


def test_empty_optional_layer(states, tmp_path):
    empty = GeometryCollection(gpd.GeoDataFrame(geometry=[], crs="EPSG:4326"))
    spec = MapBuilder().add_layer(states).add_layer(empty, required=False).build()
    path = os.path.join(tmp_path, "optional_layer.png")
    mapcompose.render(spec, path, 3, 3, dpi=test_dpi)
    assert os.path.getsize(path) > 0


@pytest.mark.parametrize("width, height", [(0, 9), (7, -1), (7, None)])
def test_invalid_size(states, tmp_path, width, height):
    spec = MapBuilder().add_layer(states).build()
    with pytest.raises(RenderError):
        mapcompose.render(spec, os.path.join(tmp_path, "size.png"), width, height)


def test_unsupported_extension(states, tmp_path):
    spec = MapBuilder().add_layer(states).build()
    with pytest.raises(RenderError):
        mapcompose.render(spec, os.path.join(tmp_path, "map.svg"), 3, 3, dpi=test_dpi)


def test_unwritable_path(states, tmp_path):
    spec = MapBuilder().add_layer(states).build()
    path = os.path.join(tmp_path, "no_such_dir", "map.png")
    with pytest.raises(RenderError):
        mapcompose.render(spec, path, 3, 3, dpi=test_dpi)
    assert not os.path.exists(path)


def test_failed_save_leaves_no_partial_file(states, tmp_path, monkeypatch):
    spec = MapBuilder().add_layer(states).build()
    path = os.path.join(tmp_path, "existing.png")
    with open(path, "wb") as f:
        f.write(b"previous image")

    def broken_savefig(self, fname, **kwargs):
        fname.write(b"half an image")
        raise OSError("disk full")

    monkeypatch.setattr(Figure, "savefig", broken_savefig)
    with pytest.raises(RenderError):
        mapcompose.render(spec, path, 3, 3, dpi=test_dpi)

    with open(path, "rb") as f:
        assert f.read() == b"previous image"
    assert os.listdir(tmp_path) == ["existing.png"]


class _FailingPlotEngine(CartopyPlotEngine):
    def plot_geo_data_frame(self, ax, gdf, **kwargs):
        raise RuntimeError("driver exploded")


def test_drawing_failure_raises_render_error(states, tmp_path):
    spec = MapBuilder().add_layer(states).build()
    with pytest.raises(RenderError) as excinfo:
        mapcompose.compose_figure(spec, 3, 3, dpi=test_dpi, plot_engine=_FailingPlotEngine())
    assert isinstance(excinfo.value.__cause__, RuntimeError)

    path = os.path.join(tmp_path, "failed.png")
    with pytest.raises(RenderError):
        mapcompose.render(spec, path, 3, 3, dpi=test_dpi, plot_engine=_FailingPlotEngine())
    assert not os.path.exists(path)

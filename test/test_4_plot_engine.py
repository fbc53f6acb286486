import pytest

from mapcompose import CartopyPlotEngine, Extent, PlotEngine
from mapcompose.mapping.cartopy_plot import geodesic_km, graticule_locations
from mapcompose.themes import get_theme
from conftest import us_states_extent

# ========================================= <mapcompose.CartopyPlotEngine> =========================================


def test_plot_engine_is_abstract():
    with pytest.raises(TypeError):
        PlotEngine()


def test_create_map():
    fig, ax = CartopyPlotEngine().create_map(7, 9, 300)
    width, height = fig.get_size_inches()
    assert (width, height) == (7, 9)
    assert fig.dpi == 300
    assert hasattr(ax, "projection")


def test_graticule_inside_extent():
    extent = Extent(*us_states_extent)
    xlocs, ylocs = graticule_locations(extent)
    assert xlocs and ylocs
    assert all(extent.min_lon <= x <= extent.max_lon for x in xlocs)
    assert all(extent.min_lat <= y <= extent.max_lat for y in ylocs)


@pytest.mark.parametrize("lat, expected_km", [(0.0, 111.32), (60.0, 55.8)])
def test_geodesic_km_per_degree(lat, expected_km):
    assert geodesic_km((0.0, lat), (1.0, lat)) == pytest.approx(expected_km, rel=0.01)


def test_theme_lookup():
    assert get_theme("grey") is get_theme("gray")
    assert get_theme("void").show_ticks is False
    with pytest.raises(ValueError):
        get_theme("dark")

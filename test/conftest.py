import os

import geopandas as gpd
import matplotlib
import pytest
from shapely.geometry import Point, box

matplotlib.use("Agg")

## ==========================

# The datasets written by the fixtures below mimic the ones of the two example maps:
# the lower 48 US states with a country overlay, and borough points coloured by "bcode".
us_states_extent = (-130.33, -50.77, 24.32, 52.54)  # (min_lon, max_lon, min_lat, max_lat)
n_states = 48
n_countries = 3
n_boroughs = 5
points_per_borough = 4
test_dpi = 50


def make_states():
    # 8 x 6 grid of "states" over the conterminous US
    geoms, names, codes = [], [], []
    for row in range(6):
        for col in range(8):
            minx = -125.0 + col * 7.25
            miny = 25.0 + row * 4.0
            geoms.append(box(minx, miny, minx + 7.25, miny + 4.0))
            names.append(f"State {row * 8 + col}")
            codes.append(row * 8 + col)
    return gpd.GeoDataFrame(
        {"name": names, "code": codes}, geometry=geoms, crs="EPSG:4326"
    )


def make_countries():
    return gpd.GeoDataFrame(
        {"name": ["Canada", "United States", "Mexico"]},
        geometry=[
            box(-141.0, 49.0, -52.0, 70.0),
            box(-125.0, 25.0, -67.0, 49.0),
            box(-117.0, 14.5, -86.7, 32.7),
        ],
        crs="EPSG:4326",
    )


def make_borough_points():
    geoms, bcodes, names = [], [], []
    for bcode in range(1, n_boroughs + 1):
        for i in range(points_per_borough):
            geoms.append(Point(-74.2 + 0.1 * bcode, 40.5 + 0.05 * i))
            bcodes.append(bcode)
            names.append(f"site {bcode}-{i}")
    return gpd.GeoDataFrame(
        {"bcode": bcodes, "name": names}, geometry=geoms, crs="EPSG:4326"
    )


@pytest.fixture(scope="session")
def data_dir(tmp_path_factory):
    return tmp_path_factory.mktemp("data")


@pytest.fixture(scope="session")
def us_states_shp(data_dir):
    path = os.path.join(data_dir, "us_states.shp")
    make_states().to_file(path)
    return path


@pytest.fixture(scope="session")
def countries_shp(data_dir):
    path = os.path.join(data_dir, "countries.shp")
    make_countries().to_file(path)
    return path


@pytest.fixture(scope="session")
def borough_points_shp(data_dir):
    path = os.path.join(data_dir, "borough_points.shp")
    make_borough_points().to_file(path)
    return path


@pytest.fixture(scope="session")
def projected_points_shp(data_dir):
    path = os.path.join(data_dir, "borough_points_3857.shp")
    make_borough_points().to_crs(epsg=3857).to_file(path)
    return path


@pytest.fixture(scope="module")
def states(us_states_shp):
    import mapcompose

    return mapcompose.read_vector(us_states_shp)


@pytest.fixture(scope="module")
def countries(countries_shp):
    import mapcompose

    return mapcompose.read_vector(countries_shp)


@pytest.fixture(scope="module")
def borough_points(borough_points_shp):
    import mapcompose

    return mapcompose.read_vector(borough_points_shp)

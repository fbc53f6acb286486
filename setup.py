# To install locally: pip install .
# To install for development: pip install -e .[test]
#
# To push a version through to pip.
#  - Make sure it installs correctly locally as above
#  - Update the version information in this file
# With twine:
#  - python -m build --sdist
#  - twine upload dist/*


from setuptools import setup

from os import path
import io

PYPI_VERSION = "1.0"  # Note: don't add any dashes if you want to use conda, use b1 not .b1 

this_directory = path.abspath(path.dirname(__file__))
with io.open(path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()


if __name__ == "__main__":
    setup(name = 'mapcompose',
          version           = PYPI_VERSION,
          description       = "Compose vector datasets into layered static maps with GeoPandas and Cartopy",
          long_description  = long_description,
          long_description_content_type='text/markdown',
          python_requires   = '>=3.9',
          install_requires  = ['numpy>=1.16.0',
                               'pandas',
                               'shapely>=2.0',
                               'matplotlib>=3.5',
                               'cartopy>=0.21',
                               'geopandas>=0.12',
                               'pyogrio',
                               'pyyaml',
                               ],
          extras_require    = {'test': ['pytest']},
          packages          = ['mapcompose',
                               'mapcompose.commands',
                               'mapcompose.mapping',
                               'mapcompose.utils'],
          package_data      = {'mapcompose': ['logging_config.yaml']},
          include_package_data = True,
          entry_points      = {'console_scripts': ['mapcompose = mapcompose.__main__:main']},
          classifiers       = ['Programming Language :: Python :: 3',
                               'Programming Language :: Python :: 3.9',
                               'Programming Language :: Python :: 3.10',
                               'Programming Language :: Python :: 3.11',
                               'Programming Language :: Python :: 3.12',
                               ]
          )

import os
import sys
from datetime import datetime
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

sys.path.insert(0, os.path.abspath("../../src"))

project = "DeliveryZones"
author = "DeliveryZones contributors"

try:
    release = pkg_version("deliveryzones")
except PackageNotFoundError:
    release = "0.0.0"

version = ".".join(release.split(".")[:2])
copyright = f"{datetime.now():%Y}, {author}"

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.autosummary",
    "sphinx.ext.intersphinx",
]

html_theme = "furo"

autosummary_generate = True
autodoc_member_order = "bysource"

napoleon_google_docstring = True
napoleon_numpy_docstring = False

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "pandas": ("https://pandas.pydata.org/pandas-docs/stable/", None),
    "shapely": ("https://shapely.readthedocs.io/en/stable/", None),
}
napoleon_type_aliases = {
    "pd.DataFrame": "pandas.DataFrame",
}

exclude_patterns = ["_build"]

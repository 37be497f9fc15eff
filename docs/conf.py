import unifi_exporter
import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.abspath('..'))

project = 'unifi-exporter'
copyright = f'{datetime.now().year}, Tyler Woods'
author = 'Tyler Woods'

release = unifi_exporter.__version__

# -- General configuration ---------------------------------------------------
extensions = [
    'sphinx.ext.autodoc',          # Core Sphinx extension for auto API docs
    'sphinx.ext.autosummary',      # Create summary tables on API doc pages
    'sphinx.ext.viewcode',         # Add links to view source code
    'sphinx.ext.napoleon',         # Support for Google or NumPy style docstrings
    'sphinx.ext.intersphinx',      # Link to other project's documentation
    'sphinx.ext.doctest',          # Run the examples in schema docstrings
    'sphinx_autodoc_typehints',    # Use type annotations for documentation
]

autosummary_generate = True
autodoc_member_order = 'bysource'
autoclass_content = 'both'
autodoc_typehints = 'description'
autodoc_typehints_format = 'short'

autosummary_imported_members = False

exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store', '_autosummary']


def skip_private_helpers(app, what, name, obj, skip, options):
    # Module-level mapping helpers of the models are not public API
    if what == 'module' and name.startswith('_'):
        return True
    return skip


def setup(app):
    app.connect('autodoc-skip-member', skip_private_helpers)


html_theme = 'sphinx_rtd_theme'
html_title = f"{project} Documentation"

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'requests': ('https://requests.readthedocs.io/en/latest/', None),
    'prometheus_client': ('https://prometheus.github.io/client_python/', None),
}

napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_include_init_with_doc = True
napoleon_include_private_with_doc = False
napoleon_use_admonition_for_notes = True
napoleon_use_ivar = True
napoleon_use_param = True
napoleon_use_rtype = True

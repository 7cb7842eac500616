import os
import re
from os.path import dirname, join

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.extlinks',
    'sphinx.ext.intersphinx',
    'sphinx.ext.viewcode',
    'sphinxcontrib.asyncio',
    'sphinx_autodoc_typehints',
]

source_suffix = '.rst'
master_doc = 'index'
project = 'seqaio'
year = '2026'
author = 'tsufeki'
copyright = '{0}, {1}'.format(year, author)

with open(join(dirname(__file__), '..', 'src', 'seqaio', '__init__.py'),
          encoding='utf8') as f:
    version = release = re.search(
        r"^__version__ = '(.*)'", f.read(), re.M,
    ).group(1)

default_role = 'py:obj'
pygments_style = 'trac'
templates_path = ['.']
intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'aiostream': ('https://aiostream.readthedocs.io/en/latest', None),
}
extlinks = {
    'issue': ('https://github.com/tsufeki/python-seqaio/issues/%s', '#%s'),
    'pr': ('https://github.com/tsufeki/python-seqaio/pull/%s', 'PR #%s'),
}

# on_rtd is whether we are on readthedocs.org
on_rtd = os.environ.get('READTHEDOCS', None) == 'True'

if not on_rtd:  # only set the theme if we're building docs locally
    html_theme = 'sphinx_rtd_theme'

html_last_updated_fmt = '%b %d, %Y'
html_split_index = False
html_sidebars = {
   '**': ['searchbox.html', 'globaltoc.html', 'sourcelink.html'],
}
html_short_title = '%s-%s' % (project, version)

nitpick_ignore = [
    ('py:obj', 'T'),
    ('py:obj', 'U'),
    ('py:obj', 'V'),
    ('py:obj', 'A'),
    ('py:class', 'seqaio.filtering._FilterIterator'),
    ('py:class', 'seqaio.comparer._Entry'),
]

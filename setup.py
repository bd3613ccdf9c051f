"""A command-line argument parser for trees of subcommands, with typed
flags, shorthand chaining, "did you mean" suggestions, and async
validation and execution.
"""

from setuptools import setup


__author__ = 'Mahmoud Hashemi'
__version__ = '0.1.0'
__contact__ = 'mahmoud@hatnote.com'
__license__ = 'BSD'


setup(name='flagtree',
      version=__version__,
      description="A command-line parser for nested subcommand trees, with typed flags and async dispatch.",
      long_description=__doc__,
      author=__author__,
      author_email=__contact__,
      packages=['flagtree', 'flagtree.test'],
      include_package_data=True,
      zip_safe=False,
      license=__license__,
      platforms='any',
      python_requires='>=3.7',
      install_requires=['boltons>=20.0.0'],
      extras_require={'test': ['pytest', 'pytest-asyncio']},
      classifiers=[
          'Topic :: Utilities',
          'Intended Audience :: Developers',
          'Topic :: Software Development :: Libraries',
          'Programming Language :: Python :: 3.7',
          'Programming Language :: Python :: 3.8',
          'Programming Language :: Python :: 3.9',
          'Programming Language :: Python :: 3.10',
          'Programming Language :: Python :: 3.11',
          'Programming Language :: Python :: 3.12',
          'Programming Language :: Python :: 3 :: Only',
          'Programming Language :: Python :: Implementation :: CPython',
          'Programming Language :: Python :: Implementation :: PyPy', ]
      )

"""
A brief checklist for release:

* pytest
* git commit (if applicable)
* Bump setup.py version off of -dev
* git commit -a -m "bump version for vx.y.z release"
* rm -rf dist/*
* python setup.py sdist bdist_wheel
* twine upload dist/*
* git tag -a vx.y.z -m "brief summary"
* write CHANGELOG
* bump setup.py version onto n+1 dev
* git push

"""

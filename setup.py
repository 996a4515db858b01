#!/usr/bin/env python
from setuptools import setup
setup(
    name='ghobjects',
    version='1.0.0',
    description='Python objects for the GitHub API, fetched lazily page by page',
    author='ghobjects contributors',

    packages=['ghobjects'],
    provides=['ghobjects'],
    python_requires='>=3.7',
    install_requires=['simplejson>=2.0.0', 'httplib2>=0.4.0'],
    extras_require={
        'test': ['pytest', 'mock'],
    },
)

#!/usr/bin/env python
from setuptools import setup, find_packages
import sys

long_description = ''

if 'sdist' in sys.argv:
    with open('README.rst') as f:
        long_description = f.read()


setup(
    name='flagfield',
    version='0.1.0',
    description='Named bitmask flag sets with copy-on-write freezing',
    packages=find_packages(exclude=['tests', 'tests.*']),
    long_description=long_description,
    license='LGPLv3+',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)',  # noqa
        'Natural Language :: English',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Software Development :: Libraries',
    ],
    python_requires='>=3.8',
    install_requires=[
        'numpy',
    ],
    extras_require={
        'hypothesis': [
            'hypothesis',
        ],
        'dev': [
            'flake8',
            'hypothesis',
            'pytest',
        ],
    },
)

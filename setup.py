#!/usr/bin/env python

from setuptools import setup

import os.path
import re


def get_version():
    path = os.path.join('webrobots', 'version.py')

    with open(path, 'r') as version_file:
        content = version_file.read()
        return re.search(r"__version__ = u?'(.+)'", content).group(1)


version = get_version()


PROJECT_PACKAGES = [
    'webrobots',
]
PROJECT_PACKAGE_DIR = {}


setup_kwargs = dict(
    name='webrobots',
    version=version,
    description='Robots exclusion checks with a per-site robots.txt cache.',
    packages=PROJECT_PACKAGES,
    package_dir=PROJECT_PACKAGE_DIR,
    classifiers=[
        'Development Status :: 4 - Beta',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Internet :: WWW/HTTP :: Indexing/Search',
    ],
    extras_require={
        'test': ['pytest'],
        },
    python_requires='>=3.8',
)


setup_kwargs['install_requires'] = [
    'chardet>=3.0',
    'robotexclusionrulesparser>=1.7.1',
    'tornado>=6.0',
]


if __name__ == '__main__':
    setup(**setup_kwargs)

#!/usr/bin/env python
from setuptools import setup, find_packages
import sys

long_description = ''

if 'sdist' in sys.argv:
    with open('README.rst') as f:
        long_description = f.read()


setup(
    name='multibitfield',
    version='0.1.0',
    description='Pack several small unsigned counters into one integer column',
    author='The multibitfield developers',
    maintainer='The multibitfield developers',
    packages=find_packages(),
    long_description=long_description,
    license='MIT',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3.6',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Database',
    ],
    install_requires=[
        'click',
        'numpy',
    ],
    extras_require={
        'dev': [
            'flake8',
            'hypothesis',
            'pytest',
        ],
    },
)

"""
Setup script for iris-kmeans package
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the relevant file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Get the code version
version = {}
with open(path.join(here, "iris_kmeans/version.py")) as fp:
    exec(fp.read(), version)
__version__ = version['__version__']
# now we have a `__version__` variable

setup(
    name='iris-kmeans',
    version=__version__,
    description='K-means clustering with a search for the minimal number of label-homogeneous clusters',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Information Analysis',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],
    keywords='kmeans clustering iris normalization',
    packages=find_packages(include=['iris_kmeans*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.17',
    ],
    extras_require={
        'test': [
            'pytest',
            'scikit-learn>=1.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'iris-kmeans=iris_kmeans.cli:main',
        ],
    },
)

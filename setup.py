"""Setup script for uniform_grid package."""

from setuptools import setup, find_packages

setup(
    name='uniform_grid',
    version='1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={'uniform_grid.config': ['defaults.yaml']},
    python_requires='>=3.9',
    install_requires=[
        'numpy>=1.20.0',
        'matplotlib>=3.3.0',
        'PyYAML>=5.4',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
)

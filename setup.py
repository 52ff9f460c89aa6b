"""
Setup script for running-stats.
"""

from setuptools import setup, find_packages

setup(
    name="running-stats",
    version="0.1.0",
    packages=find_packages(include=["running_stats", "running_stats.*"]),
    package_data={"running_stats": ["py.typed"]},
    python_requires=">=3.9",
    install_requires=["scipy"],
    extras_require={"test": ["pytest"]},
)

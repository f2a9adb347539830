"""Setup configuration for elm-test."""

from setuptools import setup, find_packages

setup(
    name="elm-test",
    version="0.19.1",
    description="Discovers, compiles and runs Elm test suites across a pool of workers",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "elm-test=elm_test.cli:main",
        ],
    },
)

"""
Setup script for cematrix

Pure Python package laid out under src/. The version is read from
src/cematrix/__init__.py so that it is declared in a single place.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/cematrix/__init__.py
def get_version():
    version_file = Path("src/cematrix/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="cematrix",
    version=get_version(),
    description="Dense and sparse matrices, decompositions, statistics and "
                "Cross-Entropy optimization",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.22",
        "scipy>=1.8",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    zip_safe=True,
)

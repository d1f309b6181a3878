"""
Setup script for sparsecol

Pure-Python package; the algorithms run on Python lists and numpy arrays,
with scipy used for interop and the direct solver.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/sparsecol/__init__.py
def get_version():
    version_file = Path("src/sparsecol/__init__.py")
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
    name="sparsecol",
    version=get_version(),
    description="Generic sparse-matrix algebra on Compressed Sparse Column storage",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["sparsecol", "sparsecol.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.22",
        "scipy>=1.8",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "hypothesis>=6.0",
        ],
    },
    zip_safe=True,
)

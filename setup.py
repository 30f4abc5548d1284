""" Setup file for co2flux

sphinx directives:

.  automodule:: package.module

"""
import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="co2flux",
    version="0.1.0",
    author="Ulrich G. Wortmann",
    license="GPL-3.0-or-later",
    author_email="uli.wortmann@utoronto.ca",
    description="Air-sea CO2 flux diagnostics for ocean carbon models",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Intended Audience :: Education",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Chemistry",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
    ],
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "pandas",
        "pint",
        "PyCO2SYS>=1.8,<2",
        "psutil",
    ],
    extras_require={
        "test": ["pytest"],
        "examples": ["matplotlib"],
    },
)

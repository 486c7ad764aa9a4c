from os import path
from setuptools import find_packages, setup

version_info = {}
with open("modelcontrasts/_version.py") as version_file:
    exec(version_file.read(), version_info)

PWD = path.abspath(path.dirname(__file__))
with open(path.join(PWD, "README.md"), encoding="utf-8") as readme:
    long_description = readme.read()

setup(
    name="modelcontrasts",
    version=version_info["__version__"],
    author="Matthew Wardrop",
    author_email="mpwardrop@gmail.com",
    description="Contrast coding of categorical data for statistical model matrices.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.8",
    install_requires=[
        "interface_meta>=1.2",
        "numpy>=1.3",
        "pandas>=1.2",
        "scipy>=1.6",
        "typing_extensions>=4.0",
        "wrapt>=1.0",
    ],
    extras_require={
        "test": [
            "black",
            "flake8",
            "pytest>=6.2.5",
            "pytest-cov>=3.0.0",
        ],
    },
)

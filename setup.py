#!/usr/bin/env python3

# flake8: noqa: E501

from setuptools import find_packages, setup


def get_version():
    """Read version from optionpages/__init__.py"""
    try:
        with open("optionpages/__init__.py") as f:
            for line in f:
                if line.startswith("__version__"):
                    return line.split("=")[1].strip().strip('"').strip("'")
    except OSError:
        pass
    return "0.1.0"


base_deps = [
    "jinja2>=3.1.4",
    "pydantic>=2.7.0",
    "toml>=0.10.2",
    "colorama>=0.4.6",
]

extras_require = {
    "test": [
        "pytest>=8.0.0",
    ],
    "dev": [
        "black>=23.0.0",
        "isort>=5.12.0",
        "flake8>=6.0.0",
    ],
}

# Read long description
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except OSError:
    long_description = "Declarative settings pages for admin dashboards."

setup(
    name="optionpages",
    version=get_version(),
    description="Declarative settings pages for admin dashboards.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=base_deps,
    extras_require=extras_require,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="admin settings configuration jinja2",
)

#!/usr/bin/env python3
# =============================================================================
#  gridslice — setup.py
#
#  For new tooling, prefer:
#      pip install -e ".[dev]"
#      python -m build
#      python -m pytest
# =============================================================================

from __future__ import annotations

import re
from pathlib import Path

from setuptools import setup, find_packages

# ---------------------------------------------------------------------------
#  Read version from the package so there is a single source of truth.
# ---------------------------------------------------------------------------
_HERE = Path(__file__).resolve().parent


def _read_version() -> str:
    """Extract ``__version__`` from gridslice/__init__.py."""
    init = _HERE / "gridslice" / "__init__.py"
    text = init.read_text(encoding="utf-8")
    match = re.search(r'^__version__(?::\s*str)?\s*=\s*"([^"]+)"', text, re.MULTILINE)
    if match:
        return match.group(1)
    return "0.0.0"


def _read_long_description() -> str:
    """Read README.md for the long description."""
    readme = _HERE / "README.md"
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


def _read_requirements() -> list[str]:
    """Read requirements.txt if it exists."""
    req_file = _HERE / "requirements.txt"
    if req_file.exists():
        lines = req_file.read_text(encoding="utf-8").splitlines()
        return [
            ln.strip()
            for ln in lines
            if ln.strip() and not ln.strip().startswith("#")
        ]
    return []


setup(
    name="gridslice",
    version=_read_version(),
    description=(
        "Select lines, whitespace-delimited fields and characters of "
        "tabular text with a compact slice expression."
    ),
    long_description=_read_long_description(),
    long_description_content_type="text/markdown",
    license="MIT",
    author="gridslice contributors",
    python_requires=">=3.9",
    packages=find_packages(
        include=[
            "gridslice",
            "gridslice.*",
        ],
        exclude=[
            "tests",
            "tests.*",
        ],
    ),
    install_requires=_read_requirements(),
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "ruff>=0.4",
            "mypy>=1.10",
            "black>=24.0",
            "isort>=5.13",
        ],
    },
    entry_points={
        "console_scripts": [
            "gridslice=gridslice.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Text Processing :: Filters",
        "Topic :: Utilities",
    ],
    keywords=[
        "cut",
        "slice",
        "text",
        "columns",
        "cli",
    ],
    zip_safe=False,
)

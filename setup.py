#!/usr/bin/env python3
# =============================================================================
#  gradestyle — setup.py  (legacy compatibility shim)
#
#  All authoritative metadata lives in pyproject.toml.
#  This file exists so that `pip install -e .` keeps working on older
#  pip / setuptools that pre-date PEP 660 editable installs.
#
#  For new tooling, prefer:
#      pip install -e ".[dev]"
#      python -m build
#      python -m pytest
# =============================================================================

from setuptools import find_packages, setup

setup(
    packages=find_packages(
        include=[
            "gradestyle",
            "gradestyle.*",
        ],
        exclude=[
            "tests",
            "tests.*",
        ],
    ),
    zip_safe=False,
)

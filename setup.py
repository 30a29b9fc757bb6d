#!/usr/bin/env python
"""Setup script for bwatools package."""

from setuptools import setup
import os
import re

# Read version from bwa_utilities.py (single source of truth)
# The module imports pydantic, so the version is extracted from the file
# instead of importing it before dependencies are installed.
version = "0.0.0"
with open("bwa_utilities.py", "r") as f:
    for line in f:
        match = re.search(r"__version__\s*=\s*['\"]([\d]+\.[\d]+\.[\d]+)['\"]", line)
        if match:
            version = match.group(1)
            break

# Read long description from README
long_description = ""
if os.path.exists("README.md"):
    with open("README.md", "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name="bwatools",
    version=version,
    description="Build bwa aln/samse/sampe and FASTQ split command lines for cluster alignment jobs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="bwatools Contributors",
    py_modules=[
        "bwa_align",
        "bwa_split",
        "bwa_utilities",
    ],
    scripts=[
        "bwa_align.py",
        "bwa_split.py",
    ],
    install_requires=[
        "pydantic>=2",    # Typed, defaulted option records validated in a single pass (bwa_align.py, bwa_split.py)
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    # External Command-Line Tools (must be installed separately, not via pip).
    # The commands built here are run by the caller, never by bwatools:
    # - BWA (Burrows-Wheeler Aligner): bwa aln, bwa samse, bwa sampe
    #   * Install: conda install -c bioconda bwa
    # - split / zcat (coreutils, gzip)
    #   * macOS: brew install coreutils, then pass --split gsplit --zcat gzcat
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Programming Language :: Python :: 3",
    ],
)

# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT

from setuptools import find_packages, setup

setup(
    name="assemblyscan",
    version="0.1.0",
    description="Collects name, vendor, and version evidence for .NET assemblies using GrokAssembly",
    license="MIT",
    packages=find_packages(include=["assemblyscan", "assemblyscan.*"]),
    package_data={"assemblyscan.analyzers": ["resources/*.zip"]},
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "dataclasses-json>=0.6",
        "defusedxml>=0.7",
        "loguru>=0.7",
        "pluggy>=1.3",
        "tomlkit>=0.12",
    ],
    extras_require={
        "test": [
            "pytest>=7",
        ],
    },
    entry_points={
        "console_scripts": [
            "assemblyscan=assemblyscan.__main__:main",
        ],
    },
)

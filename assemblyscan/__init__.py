# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import importlib.metadata

from .dependency import Dependency

__version__ = importlib.metadata.version("assemblyscan")

__all__ = ["Dependency"]

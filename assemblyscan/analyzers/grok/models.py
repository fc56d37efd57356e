# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
# pylint: disable-next=too-many-instance-attributes
class ExtractionResult:
    """What the helper tool reported about a single assembly.

    Attributes:
        product_version (Optional[str]): ProductVersion from the version resource.
        file_version (Optional[str]): FileVersion from the version resource.
        company_name (Optional[str]): CompanyName from the version resource.
        product_name (Optional[str]): ProductName from the version resource.
        file_description (Optional[str]): FileDescription from the version resource.
        internal_name (Optional[str]): InternalName from the version resource.
        original_filename (Optional[str]): OriginalFilename from the version resource.
        namespaces (Tuple[str, ...]): Namespaces of the types defined in the assembly.
        error (Optional[str]): Set when the helper could not process the file.
        warning (Optional[str]): Non-fatal problem reported by the helper.
    """

    product_version: Optional[str] = None
    file_version: Optional[str] = None
    company_name: Optional[str] = None
    product_name: Optional[str] = None
    file_description: Optional[str] = None
    internal_name: Optional[str] = None
    original_filename: Optional[str] = None
    namespaces: Tuple[str, ...] = ()
    error: Optional[str] = None
    warning: Optional[str] = None


@dataclass(frozen=True)
class InvocationTemplate:
    """How to run the helper tool: the runtime to use and the deployed helper path.

    Created once during bootstrap and shared, read-only, by every invocation.
    """

    interpreter: str
    helper_path: str

    def arguments(self, target: Optional[str] = None) -> List[str]:
        args = [self.interpreter, self.helper_path]
        if target is not None:
            args.append(target)
        return args


@dataclass(frozen=True)
class Success:
    result: ExtractionResult


@dataclass(frozen=True)
class NotApplicable:
    """Exit code 3: the file is not a .NET assembly."""


@dataclass(frozen=True)
class ToolFailure:
    code: int
    stderr: str = ""


@dataclass(frozen=True)
class ParseFailure:
    message: str


@dataclass(frozen=True)
class Cancelled:
    """The caller asked to stop while the helper was still running."""


InvocationOutcome = Union[Success, NotApplicable, ToolFailure, ParseFailure, Cancelled]

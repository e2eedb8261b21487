"""
models/custom_function.py
-------------------------
Domain model for user-defined transformation functions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID


class FunctionLanguage(str, Enum):
    PYTHON = "PYTHON"
    JAVASCRIPT = "JAVASCRIPT"
    GROOVY = "GROOVY"


@dataclass
class TestCase:
    """One stored example: input, expected output and a note."""
    __test__ = False  # not a pytest test class

    test_name: str
    input_data: Optional[str] = None
    expected_output: Optional[str] = None
    test_description: Optional[str] = None


@dataclass
class CustomFunction:
    """
    A transformation function with its source, parameter schema,
    dependencies (ordered) and test cases.

    `parameters` is an opaque JSON structure describing the arguments.
    """
    name: str
    language: Optional[FunctionLanguage] = FunctionLanguage.PYTHON
    function_body: str = ""
    description: Optional[str] = None
    category: Optional[str] = None
    function_signature: Optional[str] = None
    parameters: Optional[Any] = None
    is_safe: bool = True
    is_public: bool = False
    is_built_in: bool = False
    version: int = 1
    created_by: Optional[str] = None
    dependencies: list[str] = field(default_factory=list)
    test_cases: list[TestCase] = field(default_factory=list)
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

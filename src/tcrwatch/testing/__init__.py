#
# src/tcrwatch/testing/__init__.py
#
"""
Test execution and transcript classification sub-package for tcrwatch.
"""
from .classifier import CLASSIFICATION_RULES, ClassificationRule, Outcome, OutcomeClassifier, extract_failed_count
from .dotnet_runner import DotnetTestRunner
from .protocols import TestRunner, TestRunResult

__all__ = [
    "CLASSIFICATION_RULES",
    "ClassificationRule",
    "DotnetTestRunner",
    "Outcome",
    "OutcomeClassifier",
    "TestRunResult",
    "TestRunner",
    "extract_failed_count",
]

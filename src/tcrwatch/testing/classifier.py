#
# src/tcrwatch/testing/classifier.py
#
"""
Classifies a test transcript into a single outcome.

Classification is an ordered table of (outcome, predicate) rules evaluated
top-down; the first matching rule wins. Reordering the table is the only way
to change precedence.
"""
import re
from collections.abc import Callable
from enum import Enum

import structlog
from attrs import define

log = structlog.get_logger("testing.classifier")

NO_TESTS_MARKER = re.compile(r"No test matches the given test ?case filter", re.IGNORECASE)
NOT_IMPLEMENTED_MARKER = "NotImplementedException"
RUN_SUCCESSFUL_MARKER = "Test Run Successful."
RUN_STARTED_MARKER = "Starting test execution"
BUILD_FAILED_MARKER = "Build FAILED."
FAILED_COUNT_PATTERN = re.compile(r"Failed:\s*(\d+)")


class Outcome(Enum):
    NO_RESULTS = "NoResults"
    NO_TESTS_FOUND = "NoTestsFound"
    SINGLE_NOT_IMPLEMENTED_ALLOWED = "SingleNotImplementedAllowed"
    TESTS_PASSED = "TestsPassed"
    TESTS_FAILED = "TestsFailed"
    BUILD_FAILED = "BuildFailed"
    UNKNOWN = "Unknown"


def extract_failed_count(transcript: str) -> int | None:
    """
    Reads the failed-test count from the last 'Failed: N' token.

    Returns None when no count is reported, which is not the same as zero.
    """
    matches = FAILED_COUNT_PATTERN.findall(transcript)
    if not matches:
        return None
    return int(matches[-1])


def _is_empty(transcript: str) -> bool:
    return not transcript or not transcript.strip()


def _no_tests_found(transcript: str) -> bool:
    return bool(NO_TESTS_MARKER.search(transcript))


def _single_not_implemented(transcript: str) -> bool:
    if transcript.count(NOT_IMPLEMENTED_MARKER) != 1:
        return False
    failed = extract_failed_count(transcript)
    return failed is not None and failed <= 1


def _run_successful(transcript: str) -> bool:
    return RUN_SUCCESSFUL_MARKER in transcript


def _started_then_build_failed(transcript: str) -> bool:
    # A failing test task makes MSBuild print "Build FAILED." after the run started.
    return RUN_STARTED_MARKER in transcript and BUILD_FAILED_MARKER in transcript


def _build_failed(transcript: str) -> bool:
    return BUILD_FAILED_MARKER in transcript


@define(frozen=True, slots=True)
class ClassificationRule:
    outcome: Outcome
    matches: Callable[[str], bool]
    description: str


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(Outcome.NO_RESULTS, _is_empty, "transcript is empty"),
    ClassificationRule(Outcome.NO_TESTS_FOUND, _no_tests_found, "no test matches the filter"),
    ClassificationRule(
        Outcome.SINGLE_NOT_IMPLEMENTED_ALLOWED,
        _single_not_implemented,
        "exactly one NotImplementedException and at most one failure",
    ),
    ClassificationRule(Outcome.TESTS_PASSED, _run_successful, "test run successful"),
    ClassificationRule(Outcome.TESTS_FAILED, _started_then_build_failed, "run started and build failed"),
    ClassificationRule(Outcome.BUILD_FAILED, _build_failed, "build failed"),
)


class OutcomeClassifier:
    """Applies an ordered rule table to a transcript."""

    def __init__(self, rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES):
        self.rules = rules

    def classify(self, transcript: str | None) -> Outcome:
        text = transcript or ""
        for rule in self.rules:
            if rule.matches(text):
                log.debug("Transcript classified", outcome=rule.outcome.value, rule=rule.description)
                return rule.outcome
        log.warning("Transcript matched no classification rule", transcript_len=len(text))
        return Outcome.UNKNOWN

# 🟢🔴

"""
Base class for all Sequestre component tests.

Provides standardized test structure with:
- Automatic test discovery (test_* methods)
- Lifecycle hooks (setup/teardown)
- Integrated SystemReporter
- Standard JSON output format for the Laborant orchestrator

Test classes are also collected by pytest: the xunit ``setup_method`` /
``teardown_method`` hooks below drive the same lifecycle, one fresh
instance per test.
"""

import sys
import time
from abc import ABC
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from shared.reporter.system_reporter import SystemReporter
from shared.tests.models import (
    IndividualTestResult,
    TestFileResult,
    TestStatus,
)
from shared.tests.result_schema import SCHEMA_VERSION, format_output


class LaborantTest(ABC):
    """
    Base class for all component tests.

    Required class attributes:
        component_name: str - Name of component being tested
        test_category: str - Category: "unit", "integration", or "e2e"

    Optional class attributes:
        log_dir: str - Log directory (default: stdout only)

    Lifecycle hooks (all optional):
        setup() - Before all tests
        teardown() - After all tests
        setup_test() - Before each test
        teardown_test() - After each test

    Example:
        class TestMath(LaborantTest):
            component_name = "calculator"
            test_category = "unit"

            def test_addition(self):
                assert 2 + 2 == 4

        if __name__ == "__main__":
            TestMath.run_as_main()
    """

    # Required attributes (must be set by subclass)
    component_name: str = "unknown"
    test_category: str = "unit"

    # Optional attributes (can be overridden by subclass)
    log_dir: Optional[str] = None

    _reporter: Optional[SystemReporter] = None

    @property
    def reporter(self) -> SystemReporter:
        """Reporter shared by all instances of the concrete test class."""
        cls = type(self)
        if cls.__dict__.get("_reporter") is None:
            cls._reporter = SystemReporter(
                name=cls.__name__,
                log_dir=self.log_dir,
                level=20,  # INFO
                verbose=1,
            )
        return cls._reporter

    # ================================================================
    # LIFECYCLE HOOKS (Override in subclass if needed)
    # ================================================================

    def setup(self) -> None:
        """Optional: setup before all tests."""

    def teardown(self) -> None:
        """Optional: cleanup after all tests."""

    def setup_test(self) -> None:
        """Optional: setup before each test."""

    def teardown_test(self) -> None:
        """Optional: cleanup after each test."""

    # ================================================================
    # PYTEST BRIDGE (Do not override)
    # ================================================================

    def setup_method(self, method: Callable) -> None:
        self.setup()
        self.setup_test()

    def teardown_method(self, method: Callable) -> None:
        self.teardown_test()
        self.teardown()

    # ================================================================
    # TEST DISCOVERY AND EXECUTION (Do not override)
    # ================================================================

    def _discover_tests(self) -> List[Tuple[str, Callable]]:
        """
        Discover all test_* methods in the class.

        Returns:
            Sorted list of (method_name, bound_method) tuples
        """
        tests = []
        for name in dir(self):
            if name.startswith("test_"):
                attr = getattr(self, name)
                if callable(attr):
                    tests.append((name, attr))
        return sorted(tests)

    def _execute_test(
        self, test_name: str, test_method: Callable
    ) -> IndividualTestResult:
        """
        Execute a single test method and capture result.

        Args:
            test_name: Name of test method
            test_method: Test method to execute

        Returns:
            IndividualTestResult with execution details
        """
        start_time = time.time()

        try:
            self.setup_test()
            try:
                test_method()
            finally:
                self.teardown_test()

            return IndividualTestResult(
                name=test_name,
                status=TestStatus.PASS.value,
                duration=time.time() - start_time,
            )

        except AssertionError as e:
            return IndividualTestResult(
                name=test_name,
                status=TestStatus.FAIL.value,
                duration=time.time() - start_time,
                error=str(e) or "Assertion failed",
            )

        except Exception as e:
            return IndividualTestResult(
                name=test_name,
                status=TestStatus.ERROR.value,
                duration=time.time() - start_time,
                error=f"{type(e).__name__}: {str(e)}",
            )

    def _build_result(self, results: List[IndividualTestResult]) -> TestFileResult:
        return TestFileResult(
            schema_version=SCHEMA_VERSION,
            test_file=self.__class__.__name__,
            component=self.component_name,
            category=self.test_category,
            total=len(results),
            passed=sum(1 for r in results if r.status == TestStatus.PASS.value),
            failed=sum(1 for r in results if r.status == TestStatus.FAIL.value),
            errors=sum(1 for r in results if r.status == TestStatus.ERROR.value),
            skipped=0,
            duration=sum(r.duration for r in results),
            timestamp=datetime.now().isoformat(),
            tests=results,
            metadata={
                "python_version": sys.version.split()[0],
                "test_class": self.__class__.__name__,
            },
        )

    def run_tests(self) -> TestFileResult:
        """
        Run all discovered tests and return structured result.

        Returns:
            TestFileResult with complete execution details
        """
        try:
            self.setup()
        except Exception as e:
            return self._build_result(
                [
                    IndividualTestResult(
                        name="setup",
                        status=TestStatus.ERROR.value,
                        duration=0.0,
                        error=f"Setup failed: {str(e)}",
                    )
                ]
            )

        results = [
            self._execute_test(test_name, test_method)
            for test_name, test_method in self._discover_tests()
        ]

        try:
            self.teardown()
        except Exception as e:
            # Log teardown error but don't fail tests
            self.reporter.error(f"Teardown failed: {e}", context="Teardown")

        return self._build_result(results)

    # ================================================================
    # STANDARD ENTRY POINT (Do not override)
    # ================================================================

    @classmethod
    def run_as_main(cls) -> None:
        """
        Standard entry point for test execution.

        Call this in if __name__ == "__main__" block. Prints the results
        in the marker-wrapped JSON format and exits non-zero on failure.
        """
        result = cls().run_tests()

        print(format_output(result.to_dict()))

        sys.exit(0 if result.success else 1)

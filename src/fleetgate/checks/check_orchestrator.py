"""Health check orchestrator producing the aggregate upgrade readiness report."""

import asyncio

from fleetgate.checks.check_registry import CheckRegistry
from fleetgate.core.models import CheckResult, HealthReport
from fleetgate.interfaces.check import Check, CheckContext
from fleetgate.utils.logging import bound_context, get_logger, log_error

logger = get_logger(__name__)

CHECK_ERRORS_KEY = "check_errors"


class HealthCheckOrchestrator:
    """Orchestrates execution of readiness checks.

    This orchestrator coordinates check execution without knowing
    the specifics of each check. It handles:
    - Concurrent execution bounded by ``max_concurrent``
    - A timeout per check
    - Failure isolation (a broken check becomes a failed result)
    - Aggregation of findings into one health report

    All checks always run; there is no fail-fast mode, since the report has to
    list every problem found.
    """

    def __init__(
        self,
        registry: CheckRegistry,
        max_concurrent: int = 5,
        default_timeout: float = 300,
    ):
        """Initialize health check orchestrator.

        Args:
            registry: Check registry containing registered checks
            max_concurrent: Maximum concurrent check executions
            default_timeout: Seconds a check may run unless it sets its own timeout
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        if default_timeout <= 0:
            raise ValueError("default_timeout must be positive")
        self.registry = registry
        self.max_concurrent = max_concurrent
        self.default_timeout = default_timeout
        logger.debug(
            "health_check_orchestrator_initialized",
            max_concurrent=max_concurrent,
            default_timeout=default_timeout,
        )

    async def run_checks(self, context: CheckContext) -> list[CheckResult]:
        """Run all registered checks.

        Args:
            context: Check context with provider dependencies

        Returns:
            One result per registered check, in registration order
        """
        checks = self.registry.get_all_checks()
        logger.info("running_checks", total=len(checks))

        results = await self._run_all(checks, context)

        logger.info(
            "checks_completed",
            total=len(results),
            passed=sum(1 for r in results if r.passed),
            all_passed=all(r.passed for r in results),
        )
        return results

    async def run_specific_checks(
        self,
        context: CheckContext,
        check_names: list[str],
    ) -> list[CheckResult]:
        """Run specific named checks.

        Unknown names are skipped with a warning.

        Args:
            context: Check context
            check_names: Names of checks to run

        Returns:
            List of check results, in the order the names were given
        """
        logger.info("running_specific_checks", check_names=check_names)

        checks = []
        for check_name in check_names:
            check = self.registry.get_check(check_name)
            if check is None:
                logger.warning("check_not_found", check_name=check_name)
                continue
            checks.append(check)

        return await self._run_all(checks, context)

    async def health_report(
        self,
        context: CheckContext,
        check_names: list[str] | None = None,
    ) -> HealthReport:
        """Run checks and merge their findings into one report.

        Args:
            context: Check context
            check_names: Restrict to these checks (all registered if None)

        Returns:
            Aggregate report; empty means the fleet is ready to upgrade
        """
        if check_names is None:
            results = await self.run_checks(context)
        else:
            results = await self.run_specific_checks(context, check_names)
        return merge_findings(results)

    async def _run_all(self, checks: list[Check], context: CheckContext) -> list[CheckResult]:
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def bounded(check: Check) -> CheckResult:
            async with semaphore:
                return await self._run_one(check, context)

        return list(await asyncio.gather(*(bounded(check) for check in checks)))

    def timeout_for(self, check: Check) -> float:
        """Timeout applied to ``check``: its own if set, else the default."""
        return check.timeout_seconds or self.default_timeout

    async def _run_one(self, check: Check, context: CheckContext) -> CheckResult:
        timeout = self.timeout_for(check)
        # log lines emitted by the check itself carry its name too
        with bound_context(check_name=check.name):
            logger.debug("executing_check", timeout=timeout)

            try:
                result = await asyncio.wait_for(check.execute(context), timeout=timeout)
            except (TimeoutError, asyncio.TimeoutError):
                logger.error("check_timeout", timeout=timeout)
                return CheckResult(
                    check_name=check.name,
                    passed=False,
                    message=f"Check timed out after {timeout} seconds",
                    findings={CHECK_ERRORS_KEY: {check.name: "timed out"}},
                )
            except Exception as e:
                log_error(logger, e, operation="check")
                return CheckResult(
                    check_name=check.name,
                    passed=False,
                    message=f"Check failed with error: {e}",
                    findings={CHECK_ERRORS_KEY: {check.name: str(e) or type(e).__name__}},
                )

            logger.info("check_completed", passed=result.passed)
            return result


def merge_findings(results: list[CheckResult]) -> HealthReport:
    """Union the findings of several check results.

    Checks own disjoint report keys, except ``check_errors`` which collects an
    entry per broken check.
    """
    report: HealthReport = {}
    for result in results:
        for key, value in result.findings.items():
            if key == CHECK_ERRORS_KEY:
                report.setdefault(CHECK_ERRORS_KEY, {}).update(value)
            else:
                if key in report:
                    logger.warning("duplicate_report_key", key=key, check_name=result.check_name)
                report[key] = value
    return report

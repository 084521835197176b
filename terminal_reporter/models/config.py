"""Configuration models for the run being reported."""

from typing import Literal

from pydantic import Field

from terminal_reporter.models.base import Model


class SlowTestsConfig(Model):
    """Thresholds for reporting slow test files."""

    max: int = Field(default=5, ge=0, description="Files to report, 0 for all")
    threshold: float = Field(
        default=15000, ge=0, description="Minimum file duration in milliseconds"
    )


class ShardConfig(Model):
    """Shard of the test run executed by this process."""

    current: int = Field(..., ge=1, description="One-based shard index")
    total: int = Field(..., ge=1, description="Total number of shards")


class ReporterConfig(Model):
    """Run configuration the reporter needs to lay out its output."""

    root_dir: str = Field(..., description="Directory test paths are relative to")
    workers: int = Field(default=1, ge=1, description="Maximum parallel workers")
    global_timeout: float = Field(
        default=0, ge=0, description="Timeout for the whole run in milliseconds"
    )
    report_slow_tests: SlowTestsConfig | None = Field(
        default=None, description="Slow test file reporting, disabled when None"
    )
    shard: ShardConfig | None = Field(default=None, description="Shard details")
    test_groups_count: int | None = Field(
        default=None, ge=0, description="Number of test groups scheduled on workers"
    )
    trace_command: str = Field(
        default="npx playwright show-trace",
        description="Command suggested for opening trace attachments",
    )


class FullResult(Model):
    """Final status of the whole run."""

    status: Literal["passed", "failed", "timedout", "interrupted"]

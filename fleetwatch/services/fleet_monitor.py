import logging
from functools import lru_cache
from typing import Callable, List, Optional

from fleetwatch.config import Settings, get_settings
from fleetwatch.models.command import CommandOutcome, CommandResult
from fleetwatch.models.logs import LogStream
from fleetwatch.models.report import CycleReport
from fleetwatch.services.command_runner import run_command
from fleetwatch.services.log_delta import LogDeltaDetector
from fleetwatch.services.metric_parser import MetricParseError, parse_status_output
from fleetwatch.services.notifier import TelegramNotifier

logger = logging.getLogger(__name__)

CommandRunner = Callable[[str, float], CommandResult]


class FleetMonitor:
    """
    Runs the three probes (health, error log, validator log) over all hosts
    and decides which findings go to the local log and which to Telegram.
    """

    def __init__(
        self,
        settings: Settings,
        notifier: TelegramNotifier,
        detector: Optional[LogDeltaDetector] = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self.settings = settings
        self.notifier = notifier
        self.detector = detector or LogDeltaDetector()
        self._runner = runner
        self.last_report: Optional[CycleReport] = None

    @property
    def hosts(self) -> List[str]:
        return self.settings.hosts or []

    def _run(self, template: Optional[str], host: str) -> CommandResult:
        command = self.settings.render_command(template, host)
        return self._runner(command, self.settings.command_timeout)

    def _snapshot_host(self, host: str) -> Optional[str]:
        return None if self.settings.shared_log_snapshots else host

    def run_health_check(self) -> CycleReport:
        report = CycleReport()
        threshold = self.settings.usage_threshold

        for index, host in enumerate(self.hosts, start=1):
            result = self._run(self.settings.health_command, host)
            if result.outcome is CommandOutcome.TIMEOUT:
                self.notifier.send(f"Error: SSH command to server {index} timed out")
                continue
            if result.outcome is CommandOutcome.FAILURE:
                report.errors.append(
                    f"Error running SSH command for server {index}: {result.reason}"
                )
                continue

            try:
                sample = parse_status_output(result.stdout)
            except MetricParseError as exc:
                report.errors.append(f"Error parsing SSH output for server {index}: {exc}")
                continue

            report.messages.append(
                f"Server {index} - CPU Usage: {sample.cpu_pct:.2f}%, "
                f"Memory Usage: {sample.mem_pct:.2f}%, "
                f"Disk Usage: {sample.disk_pct:.2f}%, "
                f"Uptime: {sample.uptime}"
            )
            if sample.is_high_usage(threshold):
                report.any_high_usage = True

        summary = report.summary()
        if report.any_high_usage:
            self.notifier.send("Warning: High resource usage detected!\n" + summary)
        else:
            logger.info(summary)

        if report.errors:
            self.notifier.send(
                "Errors occurred during health check:\n" + "\n".join(report.errors)
            )

        self.last_report = report
        return report

    def check_error_logs(self) -> None:
        for host in self.hosts:
            result = self._run(self.settings.error_log_command, host)
            if not result.ok:
                logger.warning("Error reading error log on %s: %s", host, result.reason)
                continue

            observation = self.detector.observe(
                LogStream.ERROR_LOG, result.stdout, self._snapshot_host(host)
            )
            if observation.first_observation:
                continue
            if observation.delta_lines:
                delta = "\n".join(observation.delta_lines)
                logger.info("New error log entries on %s:\n%s", host, delta)
                self.notifier.send(
                    f"New log entries detected on server controller@{host}:\n{delta}"
                )
            else:
                logger.info("No changes detected in log.")

    def check_validator_logs(self) -> None:
        for host in self.hosts:
            result = self._run(self.settings.validator_log_command, host)
            if not result.ok:
                logger.warning("Error reading validator log on %s: %s", host, result.reason)
                continue

            observation = self.detector.observe(
                LogStream.VALIDATOR_LOG, result.stdout, self._snapshot_host(host)
            )
            if observation.first_observation:
                continue
            if observation.delta_lines:
                logger.info(
                    "New validator log entries on %s:\n%s",
                    host,
                    "\n".join(observation.delta_lines),
                )
            elif observation.unchanged:
                self.notifier.send(
                    f"Error: Validator is not functioning on server controller@{host}."
                )
            else:
                # lines were only dropped, e.g. the log was truncated
                logger.info("Validator log on %s changed without new entries", host)

    def run_cycle(self) -> None:
        self.run_health_check()
        self.check_error_logs()
        self.check_validator_logs()


@lru_cache(maxsize=1)
def get_fleet_monitor() -> FleetMonitor:
    settings = get_settings()
    notifier = TelegramNotifier(settings.telegram_bot_token, settings.telegram_chat_id)
    return FleetMonitor(settings, notifier)

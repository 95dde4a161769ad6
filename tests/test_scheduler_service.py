from unittest import mock

from conftest import FakeFeedClient
from journalfeed.config import SchedulerConfig
from journalfeed.model.run_result import RunResult
from journalfeed.scheduler.fetch_runner import FetchRunner
from journalfeed.scheduler.scheduler_service import SchedulerService


def _runner(journal_repo):
    return FetchRunner(journal_repo=journal_repo, feed_client=FakeFeedClient({}))


def test_start_registers_interval_job(journal_repo):
    service = SchedulerService(_runner(journal_repo), SchedulerConfig(timezone="UTC", interval_minutes=15))
    service.start()
    try:
        assert service.started
        job = service.scheduler.get_job(SchedulerService.JOB_ID)
        assert job is not None
        assert job.max_instances == 1

        status = service.status()
        assert status.enabled is True
        assert status.is_running is False
        assert status.next_run_at is not None
    finally:
        assert service.shutdown(drain_timeout=1) is True
    assert service.started is False


def test_disabled_scheduler_does_not_start(journal_repo):
    service = SchedulerService(_runner(journal_repo), SchedulerConfig(enabled=False))
    service.start()

    assert service.started is False
    status = service.status()
    assert status.enabled is False
    assert status.next_run_at is None
    assert service.shutdown(drain_timeout=0) is True


def test_shutdown_reports_undrained_pass(journal_repo):
    runner = _runner(journal_repo)
    service = SchedulerService(runner, SchedulerConfig(enabled=False))
    with mock.patch.object(runner, "wait_idle", return_value=False) as wait_idle:
        assert service.shutdown(drain_timeout=0.5) is False
    wait_idle.assert_called_once_with(0.5)


def test_job_goes_through_the_runner(journal_repo):
    runner = _runner(journal_repo)
    service = SchedulerService(runner, SchedulerConfig(enabled=False))
    with mock.patch.object(runner, "run_all", return_value=RunResult.skipped_run()) as run_all:
        service._run_job()
    run_all.assert_called_once_with()

"""
Unit tests for the unobserved failure supervisor.
"""

import asyncio
import gc

import pytest

from nick import (
    FailureSupervisor,
    InitializationFailed,
    Nick,
    UnobservedFailure,
    run,
    supervise,
)


def _drop_failed_future(loop: asyncio.AbstractEventLoop, error: BaseException) -> None:
    """Create a failed future and let it be collected without anyone awaiting it."""
    future = loop.create_future()
    future.set_exception(error)
    del future
    gc.collect()


class TestRun:
    def test_returns_main_result(self):
        async def main():
            await asyncio.sleep(0)
            return 42

        assert run(main()) == 42

    def test_main_exception_propagates(self):
        async def main():
            raise KeyError("missing")

        with pytest.raises(KeyError):
            run(main())

    def test_unobserved_failure_is_fatal(self, recording_console, read_console):
        error = RuntimeError("nobody awaited me")

        async def main():
            _drop_failed_future(asyncio.get_running_loop(), error)
            await asyncio.sleep(10)

        with pytest.raises(UnobservedFailure) as exc_info:
            run(main())

        assert exc_info.value.__cause__ is error
        assert "nobody awaited me" in read_console(recording_console)

    def test_session_usable_under_run(self, fake_environment):
        async def main():
            nick = Nick(environment=fake_environment)
            tabs = await asyncio.gather(nick.new_tab(), nick.new_tab())
            return [tab.id for tab in tabs], nick.driver.init_calls

        assert run(main()) == ([1, 2], 1)

    def test_abandoned_initialization_failure_is_fatal(
        self, fake_environment, recording_console, read_console
    ):
        async def main():
            nick = Nick(environment=fake_environment)
            nick.driver.init_error = RuntimeError("chromium died")

            opening = asyncio.ensure_future(nick.new_tab())
            await asyncio.sleep(0)
            opening.cancel()
            with pytest.raises(asyncio.CancelledError):
                await opening

            await asyncio.sleep(10)

        with pytest.raises(UnobservedFailure) as exc_info:
            run(main())

        cause = exc_info.value.__cause__
        assert isinstance(cause, InitializationFailed)
        assert isinstance(cause.__cause__, RuntimeError)
        assert "chromium died" in read_console(recording_console)

    def test_awaited_initialization_failure_is_not_escalated(self, fake_environment):
        async def main():
            nick = Nick(environment=fake_environment)
            nick.driver.init_error = RuntimeError("chromium died")

            with pytest.raises(InitializationFailed):
                await nick.new_tab()
            await asyncio.sleep(0.05)
            return "recovered"

        assert run(main()) == "recovered"

    @pytest.mark.asyncio
    async def test_supervise_restores_handler(self):
        loop = asyncio.get_running_loop()
        previous = loop.get_exception_handler()

        async def inner():
            return loop.get_exception_handler()

        handler_during = await supervise(inner())

        assert handler_during is not previous
        assert loop.get_exception_handler() is previous


class TestFailureSupervisor:
    @pytest.mark.asyncio
    async def test_install_and_uninstall(self):
        loop = asyncio.get_running_loop()
        previous = loop.get_exception_handler()
        supervisor = FailureSupervisor()

        supervisor.install()
        assert supervisor.installed is True
        assert loop.get_exception_handler() is not previous

        supervisor.uninstall()
        assert supervisor.installed is False
        assert loop.get_exception_handler() is previous

    @pytest.mark.asyncio
    async def test_double_install_rejected(self):
        supervisor = FailureSupervisor()
        supervisor.install()
        try:
            with pytest.raises(RuntimeError):
                supervisor.install()
        finally:
            supervisor.uninstall()

    @pytest.mark.asyncio
    async def test_records_and_escalates(self, recording_console):
        seen = []
        supervisor = FailureSupervisor(on_failure=seen.append)
        supervisor.install()
        error = ValueError("lost")
        try:
            _drop_failed_future(asyncio.get_running_loop(), error)
        finally:
            supervisor.uninstall()

        assert supervisor.failures == (error,)
        assert seen == [error]
        with pytest.raises(UnobservedFailure) as exc_info:
            supervisor.raise_if_failed()
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_contexts_without_exception_passed_on(self):
        loop = asyncio.get_running_loop()
        forwarded = []
        loop.set_exception_handler(lambda loop, context: forwarded.append(context))
        supervisor = FailureSupervisor()
        supervisor.install()
        try:
            loop.call_exception_handler({"message": "slow callback"})
        finally:
            supervisor.uninstall()
            loop.set_exception_handler(None)

        assert forwarded == [{"message": "slow callback"}]
        assert supervisor.failures == ()
        supervisor.raise_if_failed()

    def test_uninstall_without_install_is_noop(self):
        FailureSupervisor().uninstall()

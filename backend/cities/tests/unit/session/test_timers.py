import asyncio

from cities.logic.enums import TimerKind
from cities.session.timers import SessionTimers


async def _noop() -> None:
    return None


async def _keep_ticking() -> bool:
    return True


class TestSessionTimers:
    def test_no_timers_initially(self):
        assert SessionTimers().active_kinds == set()

    async def test_start_each_kind(self):
        timers = SessionTimers()
        timers.start_join(10, _noop)
        timers.start_progress(10, _keep_ticking)
        timers.start_inactivity(10, _noop)

        assert timers.active_kinds == {TimerKind.JOIN, TimerKind.PROGRESS, TimerKind.INACTIVITY}
        timers.cancel_all()

    async def test_cancel_one_kind(self):
        timers = SessionTimers()
        timers.start_join(10, _noop)
        timers.start_progress(10, _keep_ticking)

        timers.cancel(TimerKind.PROGRESS)
        await asyncio.sleep(0)

        assert timers.is_active(TimerKind.JOIN)
        assert not timers.is_active(TimerKind.PROGRESS)
        timers.cancel_all()

    async def test_cancel_all(self):
        timers = SessionTimers()
        timers.start_join(10, _noop)
        timers.start_inactivity(10, _noop)

        timers.cancel_all()

        assert timers.active_kinds == set()

    async def test_restart_inactivity_keeps_single_timer(self):
        fired = []

        async def on_expired():
            fired.append(1)

        timers = SessionTimers()
        timers.start_inactivity(0.02, on_expired)
        await asyncio.sleep(0.01)
        timers.start_inactivity(0.02, on_expired)
        await asyncio.sleep(0.05)

        assert fired == [1]

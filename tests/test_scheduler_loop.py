"""
Periodic jobs: due times, failure isolation and the pomodoro session tick.
"""
from __future__ import annotations

import asyncio

from app.infra.scheduler.loop import SchedulerLoop
from app.models import PomodoroSettings
from app.ui.telegram.utils.pomodoro_session import PomodoroSession


def test_jobs_run_when_due():
    async def run():
        ran = []

        async def sync():
            ran.append("sync")

        async def tick():
            ran.append("tick")

        loop = SchedulerLoop(monotonic=lambda: 0.0)
        loop.register("sync", 300, sync, run_immediately=True)
        loop.register("tick", 1, tick)

        assert await loop.run_due(now=0.0) == ["sync"]
        assert await loop.run_due(now=0.5) == []
        assert await loop.run_due(now=1.0) == ["tick"]
        assert await loop.run_due(now=300.0) == ["sync", "tick"]
        assert ran == ["sync", "tick", "sync", "tick"]

        loop.unregister("sync")
        assert await loop.run_due(now=1000.0) == ["tick"]

    asyncio.run(run())


def test_failing_job_does_not_stop_others():
    async def run():
        ran = []

        async def boom():
            raise RuntimeError("API down")

        async def ok():
            ran.append("ok")

        loop = SchedulerLoop(monotonic=lambda: 0.0)
        loop.register("boom", 1, boom, run_immediately=True)
        loop.register("ok", 1, ok, run_immediately=True)

        assert await loop.run_due(now=0.0) == ["boom", "ok"]
        assert await loop.run_due(now=1.0) == ["boom", "ok"]
        assert ran == ["ok", "ok"]

    asyncio.run(run())


def test_run_forever_stops():
    async def run():
        loop = SchedulerLoop()
        task = asyncio.get_running_loop().create_task(loop.run_forever())
        await asyncio.sleep(0)
        loop.stop()
        await asyncio.wait_for(task, timeout=2)

    asyncio.run(run())


def test_pomodoro_session_announces_finished_phase():
    async def run():
        said = []

        async def announce(text: str) -> None:
            said.append(text)

        session = PomodoroSession(PomodoroSettings(work_duration=1), announce)
        session.timer.start()
        for _ in range(59):
            assert await session.tick() is None
        finished = await session.tick()
        assert finished is not None
        assert said == ["Work session completed! Time for a short break!"]

        assert session.sync_settings(PomodoroSettings(work_duration=1)) is False
        assert session.sync_settings(PomodoroSettings(work_duration=30)) is True
        assert session.timer.display() == "05:00"  # still on the short break, reset to its length

    asyncio.run(run())

from datetime import date

from focus_timer.models import BREAK, WORK, PhaseConfig
from focus_timer.pomodoro import PomodoroService
from focus_timer.settings import SettingsStore
from focus_timer.stats import DailyStats


def make_service(clock, today, config=None, **kwargs):
    stats = DailyStats(today_provider=today)
    service = PomodoroService(config or PhaseConfig(), stats, time_provider=clock, today_provider=today, **kwargs)
    events = []
    service.phase_completed.connect(events.append)
    return service, events


def run_phase(service, clock):
    service.start()
    clock.advance(service.remaining_seconds)
    service.countdown.tick()


def test_initial_state(clock, today, qtbot):
    service, _ = make_service(clock, today)
    assert service.phase == WORK
    assert not service.running
    assert service.remaining_seconds == 25 * 60
    assert service.progress == 0.0


def test_default_cycle_scenario(clock, today, qtbot):
    service, events = make_service(clock, today)
    service.start()
    clock.advance(1500)
    service.countdown.tick()

    assert service.phase == BREAK
    assert service.stats.query("2025-03-14") == 1
    assert [e.ended_phase for e in events] == [WORK]
    assert events[0].title == "Work complete"
    assert not service.running
    assert service.remaining_seconds == 5 * 60

    service.skip()
    assert service.phase == WORK
    assert service.stats.query("2025-03-14") == 1
    assert len(events) == 1

    service.start()
    clock.advance(500)
    service.countdown.tick()
    assert service.remaining_seconds == 1000
    service.reset()
    assert service.remaining_seconds == 1500
    assert not service.running
    assert service.phase == WORK


def test_break_completion_does_not_credit(clock, today, qtbot):
    service, events = make_service(clock, today, PhaseConfig(work_minutes=1, break_minutes=1))
    run_phase(service, clock)
    run_phase(service, clock)
    assert service.phase == WORK
    assert service.stats.query("2025-03-14") == 1
    assert [e.ended_phase for e in events] == [WORK, BREAK]
    assert events[1].body == "Break's over. Back to focus time."


def test_sequential_work_sessions_accumulate(clock, today, qtbot):
    service, _ = make_service(clock, today, PhaseConfig(work_minutes=1, break_minutes=1))
    for _ in range(3):
        run_phase(service, clock)  # work
        run_phase(service, clock)  # break
    assert service.stats.query("2025-03-14") == 3


def test_skip_never_credits(clock, today, qtbot):
    service, events = make_service(clock, today, PhaseConfig(work_minutes=1, break_minutes=1))
    run_phase(service, clock)  # work completes -> break
    service.skip()  # break -> work
    service.start()
    clock.advance(30)
    service.countdown.tick()
    service.skip()  # work abandoned -> break
    service.skip()  # break -> work
    run_phase(service, clock)
    assert service.stats.query("2025-03-14") == 2
    assert len(events) == 2


def test_skip_stops_countdown_and_does_not_auto_chain(clock, today, qtbot):
    service, _ = make_service(clock, today, PhaseConfig(work_minutes=2, break_minutes=1, auto_chain=True))
    skipped = []
    service.skipped.connect(skipped.append)
    service.start()
    clock.advance(10)
    service.skip()
    assert service.phase == BREAK
    assert not service.running
    assert service.remaining_seconds == 60
    assert skipped == [BREAK]
    clock.advance(100)
    service.countdown.tick()
    assert service.remaining_seconds == 60


def test_reset_keeps_phase(clock, today, qtbot):
    service, events = make_service(clock, today, PhaseConfig(work_minutes=1, break_minutes=3))
    run_phase(service, clock)
    resets = []
    service.reset_performed.connect(lambda: resets.append(True))
    service.start()
    clock.advance(45)
    service.countdown.tick()
    service.reset()
    assert service.phase == BREAK
    assert service.remaining_seconds == 180
    assert resets == [True]
    assert len(events) == 1


def test_start_resumes_from_paused_value(clock, today, qtbot):
    service, _ = make_service(clock, today)
    service.start()
    clock.advance(100)
    service.pause()
    assert service.remaining_seconds == 1400
    clock.advance(1000)
    service.start()
    clock.advance(10)
    service.countdown.tick()
    assert service.remaining_seconds == 1390


def test_start_requested_emitted_for_each_manual_start(clock, today, qtbot):
    service, _ = make_service(clock, today)
    requests = []
    service.start_requested.connect(lambda: requests.append(True))
    service.start()
    service.start()
    assert len(requests) == 2
    assert service.running


def test_config_change_while_paused_resyncs(clock, today, qtbot):
    service, _ = make_service(clock, today)
    service.start()
    clock.advance(60)
    service.pause()
    service.update_config(PhaseConfig(work_minutes=30, break_minutes=5))
    assert service.remaining_seconds == 30 * 60
    assert service.phase == WORK


def test_config_change_while_running_is_deferred(clock, today, qtbot):
    service, _ = make_service(clock, today)
    service.start()
    clock.advance(10)
    service.countdown.tick()
    service.update_config(PhaseConfig(work_minutes=30, break_minutes=10))
    assert service.running
    assert service.remaining_seconds == 1490
    clock.advance(5)
    service.countdown.tick()
    assert service.remaining_seconds == 1485
    service.reset()
    assert service.remaining_seconds == 1800


def test_config_change_while_running_applies_at_next_phase(clock, today, qtbot):
    service, _ = make_service(clock, today, PhaseConfig(work_minutes=1, break_minutes=1))
    service.start()
    service.update_config(PhaseConfig(work_minutes=1, break_minutes=7))
    clock.advance(60)
    service.countdown.tick()
    assert service.phase == BREAK
    assert service.remaining_seconds == 7 * 60


def test_config_change_in_break_targets_break_duration(clock, today, qtbot):
    service, _ = make_service(clock, today)
    service.skip()
    service.update_config(PhaseConfig(work_minutes=50, break_minutes=10))
    assert service.remaining_seconds == 600


def test_non_positive_durations_are_ignored(clock, today, qtbot):
    service, _ = make_service(clock, today)
    service.update_config(PhaseConfig(work_minutes=0, break_minutes=-3, auto_chain=True))
    assert service.config.work_minutes == 25
    assert service.config.break_minutes == 5
    assert service.config.auto_chain is True
    assert service.remaining_seconds == 1500


def test_auto_chain_rearms_immediately(clock, today, qtbot):
    service, events = make_service(clock, today, PhaseConfig(work_minutes=1, break_minutes=1, auto_chain=True))
    service.start()
    clock.advance(61)
    service.countdown.tick()
    assert service.phase == BREAK
    assert service.running
    assert service.remaining_seconds == 60
    assert service.countdown.scheduled
    assert len(events) == 1
    clock.advance(60)
    service.countdown.tick()
    assert service.phase == WORK
    assert service.running
    assert service.stats.query("2025-03-14") == 1
    service.shutdown()


def test_auto_chain_rearm_happens_after_transition(clock, today, qtbot):
    service, _ = make_service(clock, today, PhaseConfig(work_minutes=1, break_minutes=2, auto_chain=True))
    seen = []
    service.phase_completed.connect(
        lambda e: seen.append((service.phase, service.running, service.stats.today_count()))
    )
    run_phase(service, clock)
    # completion is observed before the flip and before re-arm, after credit
    assert seen == [(WORK, False, 1)]
    assert service.remaining_seconds == 120
    service.shutdown()


def test_auto_chain_with_delay(clock, today, qtbot):
    service, _ = make_service(
        clock, today, PhaseConfig(work_minutes=1, break_minutes=1, auto_chain=True), auto_chain_delay_ms=20
    )
    run_phase(service, clock)
    assert service.phase == BREAK
    assert not service.running
    assert service.auto_chain_pending
    qtbot.waitUntil(lambda: service.running, timeout=1000)
    assert service.remaining_seconds == 60
    service.shutdown()


def test_manual_action_cancels_pending_auto_chain(clock, today, qtbot):
    service, _ = make_service(
        clock, today, PhaseConfig(work_minutes=1, break_minutes=1, auto_chain=True), auto_chain_delay_ms=30
    )
    run_phase(service, clock)
    service.pause()
    assert not service.auto_chain_pending
    qtbot.wait(120)
    assert not service.running


def test_shutdown_cancels_everything(clock, today, qtbot):
    service, events = make_service(
        clock, today, PhaseConfig(work_minutes=1, break_minutes=1, auto_chain=True), auto_chain_delay_ms=30
    )
    run_phase(service, clock)
    service.shutdown()
    qtbot.wait(120)
    assert not service.running
    assert not service.countdown.scheduled
    assert len(events) == 1


def test_credit_uses_day_of_completion(clock, today, qtbot):
    today.day = date(2025, 3, 14)
    service, _ = make_service(clock, today)
    service.start()
    today.day = date(2025, 3, 15)
    clock.advance(1500)
    service.countdown.tick()
    assert service.stats.query("2025-03-14") == 0
    assert service.stats.query("2025-03-15") == 1


def test_progress_tracks_elapsed_fraction(clock, today, qtbot):
    service, _ = make_service(clock, today, PhaseConfig(work_minutes=10, break_minutes=5))
    service.start()
    clock.advance(150)
    service.countdown.tick()
    assert service.progress == 0.25
    service.shutdown()



def test_auto_chain_toggle_while_paused_keeps_remaining(clock, today, qtbot):
    service, _ = make_service(clock, today)
    service.start()
    clock.advance(600)
    service.pause()
    assert service.remaining_seconds == 900
    service.update_config(PhaseConfig(work_minutes=25, break_minutes=5, auto_chain=True))
    assert service.config.auto_chain is True
    assert service.remaining_seconds == 900
    assert not service.running


def test_saving_unchanged_settings_while_paused_keeps_remaining(clock, today, qtbot):
    service, _ = make_service(clock, today)
    settings = SettingsStore()
    settings.changed.connect(service.update_config)
    service.start()
    clock.advance(600)
    service.pause()
    assert settings.update(work_minutes=25, break_minutes=5, auto_chain=False)
    assert service.remaining_seconds == 900
    service.start()
    clock.advance(100)
    service.countdown.tick()
    assert service.remaining_seconds == 800
    service.shutdown()


def test_break_minutes_edit_while_paused_in_work_resyncs_work(clock, today, qtbot):
    service, _ = make_service(clock, today)
    service.start()
    clock.advance(600)
    service.pause()
    service.update_config(PhaseConfig(work_minutes=25, break_minutes=10))
    assert service.remaining_seconds == 1500

from app.analysis.models import PlagiarismIssue, PlagiarismResult, QualityResult, StageKind
from app.analysis.store import SharedStateStore


def test_store_starts_empty_for_every_stage():
    store = SharedStateStore()

    for stage in StageKind:
        state = store.get_state(stage)
        assert state.result is None
        assert state.in_flight is False
        assert state.last_updated is None


def test_mark_in_flight_is_exclusive_and_write_clears_it():
    store = SharedStateStore()

    assert store.mark_in_flight(StageKind.QUALITY) is True
    assert store.mark_in_flight(StageKind.QUALITY) is False
    assert store.get_state(StageKind.QUALITY).in_flight is True
    assert store.any_in_flight() is True

    store.write(StageKind.QUALITY, QualityResult(score=70))
    state = store.get_state(StageKind.QUALITY)
    assert state.in_flight is False
    assert state.result.score == 70
    assert state.last_updated is not None


def test_snapshot_is_a_copy():
    store = SharedStateStore()
    store.write(StageKind.PLAGIARISM, PlagiarismResult(score=10))

    snapshot = store.get_state(StageKind.PLAGIARISM)
    snapshot.in_flight = True

    assert store.get_state(StageKind.PLAGIARISM).in_flight is False


def test_snapshot_results_do_not_share_lists_with_the_store():
    store = SharedStateStore()
    store.write(StageKind.QUALITY, QualityResult(score=70, strengths=["Readable"]))
    store.write(StageKind.PLAGIARISM, PlagiarismResult(score=80, issues=[PlagiarismIssue(description="Loop")]))

    store.get_state(StageKind.QUALITY).result.strengths.append("Injected")
    store.snapshot()[StageKind.PLAGIARISM].result.issues.clear()

    assert store.get_state(StageKind.QUALITY).result.strengths == ["Readable"]
    assert len(store.get_state(StageKind.PLAGIARISM).result.issues) == 1


def test_last_updated_is_strictly_increasing_with_frozen_clock():
    store = SharedStateStore(clock=lambda: 1000.0)

    first = store.write(StageKind.QUALITY, QualityResult(score=1)).last_updated
    second = store.write(StageKind.QUALITY, QualityResult(score=2)).last_updated

    assert second > first


def test_subscribers_see_every_write_and_can_unsubscribe():
    store = SharedStateStore()
    seen = []

    unsubscribe = store.subscribe(lambda stage, state: seen.append((stage, state.in_flight)))
    store.mark_in_flight(StageKind.FEEDBACK)
    store.write(StageKind.FEEDBACK, QualityResult(score=5))
    unsubscribe()
    store.write(StageKind.FEEDBACK, QualityResult(score=6))

    assert seen == [(StageKind.FEEDBACK, True), (StageKind.FEEDBACK, False)]


def test_failing_listener_does_not_block_others():
    store = SharedStateStore()
    seen = []

    def _broken(stage, state):
        raise RuntimeError("listener bug")

    store.subscribe(_broken)
    store.subscribe(lambda stage, state: seen.append(stage))
    store.write(StageKind.QUALITY, QualityResult(score=1))

    assert seen == [StageKind.QUALITY]


def test_reset_clears_results():
    store = SharedStateStore()
    store.write(StageKind.QUALITY, QualityResult(score=1))

    store.reset()

    assert store.get_state(StageKind.QUALITY).result is None
    assert store.has_result(StageKind.QUALITY) is False

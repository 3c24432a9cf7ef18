"""Tests for answer aggregation and best slot selection."""

from datetime import date, time
from types import SimpleNamespace
from uuid import uuid4

from slotpoll.models import ResponseStatus
from slotpoll.scheduling.summary import (
    SlotSummary,
    combine_statuses,
    date_progress,
    group_slots_by_date,
    select_best,
    summarize,
)

MON = date(2026, 11, 2)
TUE = date(2026, 11, 3)


def slot(day: date, start: int, end: int):
    return SimpleNamespace(id=uuid4(), date=day, start_time=time(start), end_time=time(end))


def answer(respondent_id, slot_, status: str):
    return SimpleNamespace(respondent_id=respondent_id, time_slot_id=slot_.id, status=status)


def summary(ok: int, ng: int, maybe: int = 0) -> SlotSummary:
    return SlotSummary(
        slot_id=uuid4(),
        date=MON,
        start_time=time(9),
        end_time=time(10),
        ok_count=ok,
        maybe_count=maybe,
        ng_count=ng,
        total_respondents=ok + ng + maybe,
    )


class TestSummarize:
    def test_counts_per_status(self):
        s = slot(MON, 10, 11)
        people = [uuid4() for _ in range(4)]
        responses = [
            answer(people[0], s, "ok"),
            answer(people[1], s, "ok"),
            answer(people[2], s, "maybe"),
            answer(people[3], s, "ng"),
        ]
        result = summarize([s], responses)
        (only,) = result.slots
        assert (only.ok_count, only.maybe_count, only.ng_count) == (2, 1, 1)
        assert result.total_respondents == 4

    def test_counts_independent_of_response_order(self):
        s = slot(MON, 10, 11)
        people = [uuid4() for _ in range(4)]
        responses = [
            answer(people[0], s, "ng"),
            answer(people[1], s, "maybe"),
            answer(people[2], s, "ok"),
            answer(people[3], s, "ok"),
        ]
        assert summarize([s], responses) == summarize([s], list(reversed(responses)))

    def test_slot_without_answers_is_all_zero(self):
        answered, empty = slot(MON, 10, 11), slot(MON, 11, 12)
        result = summarize([answered, empty], [answer(uuid4(), answered, "ok")])
        by_id = {s.slot_id: s for s in result.slots}
        assert (by_id[empty.id].ok_count, by_id[empty.id].maybe_count, by_id[empty.id].ng_count) == (0, 0, 0)

    def test_total_respondents_is_event_wide(self):
        a, b = slot(MON, 10, 11), slot(MON, 11, 12)
        alice, bob = uuid4(), uuid4()
        responses = [answer(alice, a, "ok"), answer(alice, b, "ok"), answer(bob, a, "ng")]
        result = summarize([a, b], responses)
        assert [s.total_respondents for s in result.slots] == [2, 2]
        by_id = {s.slot_id: s for s in result.slots}
        # Bob never answered slot b, so its counts sum to less than the total
        assert by_id[b.id].ok_count + by_id[b.id].maybe_count + by_id[b.id].ng_count == 1

    def test_respondent_ids_include_people_without_answers(self):
        s = slot(MON, 10, 11)
        alice, carol = uuid4(), uuid4()
        result = summarize([s], [answer(alice, s, "ok")], respondent_ids=[alice, carol])
        assert result.total_respondents == 2

    def test_ordered_by_date_then_start(self):
        late_tue, early_tue, late_mon, early_mon = (
            slot(TUE, 15, 16),
            slot(TUE, 9, 10),
            slot(MON, 14, 15),
            slot(MON, 8, 9),
        )
        result = summarize([late_tue, early_tue, late_mon, early_mon], [])
        assert [s.slot_id for s in result.slots] == [
            early_mon.id,
            late_mon.id,
            early_tue.id,
            late_tue.id,
        ]

    def test_responses_for_unknown_slots_are_ignored(self):
        s, stray = slot(MON, 10, 11), slot(MON, 12, 13)
        result = summarize([s], [answer(uuid4(), stray, "ok")])
        assert result.slots[0].ok_count == 0

    def test_no_slots(self):
        result = summarize([], [])
        assert result.slots == []
        assert result.total_respondents == 0

    def test_idempotent(self):
        slots = [slot(MON, 10, 11), slot(TUE, 10, 11)]
        person = uuid4()
        responses = [answer(person, slots[0], "ok"), answer(person, slots[1], "ng")]
        first = summarize(slots, responses)
        assert summarize(slots, responses) == first
        assert select_best(first.slots) == select_best(summarize(slots, responses).slots)


class TestSelectBest:
    def test_equal_ok_broken_by_fewer_ng(self):
        candidates = [summary(ok=2, ng=1), summary(ok=2, ng=0), summary(ok=1, ng=0)]
        assert select_best(candidates) is candidates[1]

    def test_more_ok_wins(self):
        candidates = [summary(ok=1, ng=0), summary(ok=3, ng=2)]
        assert select_best(candidates) is candidates[1]

    def test_maybe_is_not_a_tie_breaker(self):
        candidates = [summary(ok=2, ng=0, maybe=0), summary(ok=2, ng=0, maybe=5)]
        assert select_best(candidates) is candidates[0]

    def test_full_tie_keeps_first(self):
        candidates = [summary(ok=1, ng=1), summary(ok=1, ng=1), summary(ok=1, ng=1)]
        assert select_best(candidates) is candidates[0]

    def test_empty(self):
        assert select_best([]) is None


class TestDateGrouping:
    def test_group_slots_by_date(self):
        tue, mon_late, mon_early = slot(TUE, 9, 10), slot(MON, 14, 15), slot(MON, 9, 10)
        groups = group_slots_by_date([tue, mon_late, mon_early])
        assert list(groups) == [MON, TUE]
        assert groups[MON] == [mon_early, mon_late]

    def test_combine_statuses(self):
        assert combine_statuses([]) is None
        assert combine_statuses([None, None]) is None
        assert combine_statuses(["ok", "ok"]) is ResponseStatus.OK
        assert combine_statuses(["ng", "ng"]) is ResponseStatus.NG
        assert combine_statuses(["ok", "ng"]) is ResponseStatus.MAYBE
        assert combine_statuses(["maybe", "ng"]) is ResponseStatus.MAYBE
        assert combine_statuses(["ok", None]) is ResponseStatus.OK

    def test_date_progress(self):
        mon_a, mon_b, tue_a = slot(MON, 10, 11), slot(MON, 13, 14), slot(TUE, 10, 11)
        person = uuid4()
        responses = [answer(person, mon_a, "ok"), answer(person, mon_b, "ng"), answer(person, tue_a, "ok")]
        monday, tuesday = date_progress([tue_a, mon_a, mon_b], responses)

        assert monday.date == MON
        assert monday.complete and not monday.partial
        assert monday.status is ResponseStatus.MAYBE
        assert tuesday.complete
        assert tuesday.status is ResponseStatus.OK

    def test_date_progress_partial(self):
        mon_a, mon_b = slot(MON, 10, 11), slot(MON, 13, 14)
        (monday,) = date_progress([mon_a, mon_b], [answer(uuid4(), mon_a, "ok")])
        assert monday.answered_count == 1
        assert monday.partial and not monday.complete

    def test_date_progress_unanswered(self):
        (monday,) = date_progress([slot(MON, 10, 11)], [])
        assert monday.status is None
        assert not monday.partial and not monday.complete

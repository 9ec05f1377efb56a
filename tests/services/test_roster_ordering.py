"""명단 그룹핑 / 정렬 테스트."""

from factories import conditional, day, record
from tripcommit.services.roster_ordering import BUCKETS, DISPLAY_ORDER, bucket_for, group_and_order


def _ids(participants):
    return [p.user_id for p in participants]


def test_every_bucket_present_on_empty_snapshot():
    groups = group_and_order([])
    assert set(groups) == set(BUCKETS)
    assert all(members == [] for members in groups.values())


def test_cancelled_folds_into_declined():
    snapshot = [record(1, "declined"), record(2, "cancelled")]
    groups = group_and_order(snapshot)
    assert _ids(groups["declined"]) == [1, 2]
    assert "cancelled" not in groups
    assert bucket_for(record(3, "cancelled")) == "declined"


def test_display_order_has_no_cancelled_section():
    assert DISPLAY_ORDER[0] == "confirmed"
    assert "cancelled" not in DISPLAY_ORDER
    assert set(DISPLAY_ORDER) == set(BUCKETS)


def test_confirmed_sorted_by_confirmed_at():
    snapshot = [
        record(3, "confirmed", confirmed_at=day(3)),
        record(1, "confirmed", confirmed_at=day(1)),
        record(2, "confirmed", confirmed_at=day(2)),
    ]
    assert _ids(group_and_order(snapshot)["confirmed"]) == [1, 2, 3]


def test_confirmed_without_timestamp_sorts_last():
    snapshot = [
        record(1, "confirmed"),
        record(2, "confirmed", confirmed_at=day(9)),
        record(3, "confirmed", confirmed_at=day(4)),
    ]
    assert _ids(group_and_order(snapshot)["confirmed"]) == [3, 2, 1]


def test_waitlist_is_first_in_first_out():
    snapshot = [
        record(1, "waitlist", updated_at=day(8)),
        record(2, "waitlist"),
        record(3, "waitlist", updated_at=day(2)),
        record(4, "waitlist", updated_at=day(5)),
    ]
    assert _ids(group_and_order(snapshot)["waitlist"]) == [3, 4, 1, 2]


def test_conditional_sorted_by_effective_deadline():
    snapshot = [
        conditional(1, "date", date=day(20)),
        conditional(2, "users", waits_on=[4]),
        conditional(3, "date", date=day(5)),
        conditional(4, "date", date=day(12)),
    ]
    # 2는 4를 기다리므로 실질 마감은 12일. 동률이면 스냅샷 순서 유지
    assert _ids(group_and_order(snapshot)["conditional"]) == [3, 2, 4, 1]


def test_conditional_with_deadline_before_without():
    snapshot = [
        conditional(1, "users", waits_on=[9], full_name="Aaron"),
        conditional(2, "date", date=day(28), full_name="Zed"),
    ]
    assert _ids(group_and_order(snapshot)["conditional"]) == [2, 1]


def test_conditional_without_deadline_sorted_by_name_case_insensitive():
    snapshot = [
        conditional(1, "users", waits_on=[9], full_name="Zoe"),
        conditional(2, "users", waits_on=[9], full_name="bob"),
        conditional(3, "users", waits_on=[9], email="carol@example.com"),
    ]
    assert _ids(group_and_order(snapshot)["conditional"]) == [2, 3, 1]


def test_other_buckets_keep_snapshot_order():
    snapshot = [
        record(5, "pending"),
        record(2, "interested"),
        record(1, "pending"),
        record(4, "interested"),
        record(3, "pending"),
    ]
    groups = group_and_order(snapshot)
    assert _ids(groups["pending"]) == [5, 1, 3]
    assert _ids(groups["interested"]) == [2, 4]


def test_input_is_not_mutated():
    snapshot = [
        record(2, "confirmed", confirmed_at=day(2)),
        record(1, "confirmed", confirmed_at=day(1)),
    ]
    group_and_order(snapshot)
    assert _ids(snapshot) == [2, 1]

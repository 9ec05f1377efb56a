"""상호 의존(직접 쌍) 경고 테스트."""

from factories import conditional, record
from tripcommit.services.mutual_dependency import is_mutually_dependent, mutual_dependency_ids


def test_candidate_waiting_on_me_is_mutual():
    me = record(1, "pending")
    candidate = conditional(2, "users", waits_on=[1])
    assert is_mutually_dependent(2, me, [me, candidate]) is True


def test_candidate_waiting_on_someone_else_is_not_mutual():
    me = record(1, "pending")
    candidate = conditional(2, "users", waits_on=[3])
    assert is_mutually_dependent(2, me, [me, candidate, record(3)]) is False


def test_candidate_not_conditional_is_not_mutual():
    """저장된 conditional_user_ids가 남아 있어도 status가 conditional이 아니면 무시."""
    me = record(1, "pending")
    candidate = record(2, "confirmed", conditional_type="users", conditional_user_ids=[1])
    assert is_mutually_dependent(2, me, [me, candidate]) is False


def test_unknown_candidate_is_not_mutual():
    me = record(1, "pending")
    assert is_mutually_dependent(99, me, [me]) is False


def test_only_direct_pairs_are_flagged():
    """A→B→C→A 같은 긴 순환은 한 단계 검사로 잡지 않음."""
    a = conditional(1, "users", waits_on=[2])
    b = conditional(2, "users", waits_on=[3])
    c = conditional(3, "users", waits_on=[1])
    snapshot = [a, b, c]
    assert is_mutually_dependent(2, a, snapshot) is False
    assert is_mutually_dependent(1, c, snapshot) is False
    assert is_mutually_dependent(3, a, snapshot) is True


def test_mutual_dependency_ids_keeps_input_order():
    me = record(1, "pending")
    snapshot = [
        me,
        conditional(2, "users", waits_on=[1]),
        conditional(3, "both", waits_on=[4]),
        conditional(4, "users", waits_on=[1, 3]),
    ]
    assert mutual_dependency_ids(me, snapshot, [4, 3, 2, 77]) == [4, 2]

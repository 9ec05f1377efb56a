# 정원 계산 (권고용). 정원이 차도 확정을 막거나 대기자로 옮기지 않음.

from typing import List, NamedTuple, Optional

# 확정 인원이 정원의 이 비율 이상이면 "filling"
FILLING_RATIO = 0.8


class CapacitySummary(NamedTuple):
    is_full: bool
    spots_remaining: Optional[int]
    pipeline_total: int
    waitlist_count: int


def capacity_summary(
    confirmed_count: int,
    capacity_limit: Optional[int],
    conditional_count: int,
    waitlist_count: int,
) -> CapacitySummary:
    """
    - is_full: 정원이 있고 confirmed >= 정원
    - spots_remaining: 정원 없으면 None, 있으면 max(0, 정원 - confirmed)
    - pipeline_total: confirmed + conditional (대기자는 정원 비교에 넣지 않고 따로 보고)
    """
    if capacity_limit is None:
        return CapacitySummary(False, None, confirmed_count + conditional_count, waitlist_count)
    return CapacitySummary(
        is_full=confirmed_count >= capacity_limit,
        spots_remaining=max(0, capacity_limit - confirmed_count),
        pipeline_total=confirmed_count + conditional_count,
        waitlist_count=waitlist_count,
    )


def capacity_warning(confirmed_count: int, capacity_limit: Optional[int]) -> Optional[str]:
    """정원이 찬 상태에서 confirmed를 고를 때 보여줄 경고. 정원에 여유가 있으면 None."""
    if capacity_limit is None or confirmed_count < capacity_limit:
        return None
    return (
        f"This trip is at full capacity ({confirmed_count}/{capacity_limit}). "
        f"If you confirm, you may be moved to the waitlist."
    )


def fill_level(confirmed_count: int, capacity_limit: Optional[int]) -> str:
    """정원 막대 색 구분: unlimited / open / filling / full."""
    if capacity_limit is None:
        return "unlimited"
    if confirmed_count >= capacity_limit:
        return "full"
    if confirmed_count >= capacity_limit * FILLING_RATIO:
        return "filling"
    return "open"


def default_expanded_sections(summary: CapacitySummary) -> List[str]:
    # 모집 중이면 주요 섹션을 펼치고, 정원이 찼으면 모두 접음
    if summary.is_full:
        return []
    return ["confirmed", "conditional"]

# SSE + Redis Pub/Sub: 참가자 상태 변경 알림
# 알림에는 변경 사실만 담음 (delta 아님). 클라이언트는 알림을 받으면 전체 명단(roster)을 다시 조회.
# Redis Pub/Sub: 멀티 워커 환경에서도 확장 가능, 발행/구독 분리

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)

# Docker 환경에서는 localhost가 아니라 서비스명(redis)을 사용해야 함
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CHANNEL_PREFIX = "trip:"
CHANNEL_SUFFIX = ":participants"
EVENT_PARTICIPANTS_CHANGED = "participants_changed"
HEARTBEAT_INTERVAL = 15.0

# 모듈 단일 클라이언트 재사용 (매 루프마다 새 연결 생성 방지)
redis_client = redis.from_url(REDIS_URL, decode_responses=True)


def _channel(trip_id: int) -> str:
    return f"{CHANNEL_PREFIX}{trip_id}{CHANNEL_SUFFIX}"


def build_participants_changed(trip_id: int, user_id: int, status: Optional[str]) -> dict:
    return {
        "type": EVENT_PARTICIPANTS_CHANGED,
        "trip_id": trip_id,
        "user_id": user_id,
        "status": status,
        "ts": datetime.now(timezone.utc).isoformat(),
    }


def format_sse(data: str) -> str:
    """Redis 메시지 → SSE 프레임. type이 없거나 파싱 실패면 participants_changed로 전달."""
    event_name = EVENT_PARTICIPANTS_CHANGED
    try:
        parsed = json.loads(data)
        if isinstance(parsed, dict) and parsed.get("type"):
            event_name = parsed["type"]
    except ValueError:
        pass
    return f"event: {event_name}\ndata: {data}\n\n"


async def publish_participants_changed(trip_id: int, user_id: int, status: Optional[str]) -> None:
    """상태 변경/참가자 추가 commit 후 라우터에서 호출."""
    payload = build_participants_changed(trip_id, user_id, status)
    try:
        await redis_client.publish(_channel(trip_id), json.dumps(payload))
    except Exception:
        # Redis 미기동 시 스트림만 실패, 쓰기 요청은 유지
        logger.warning("participants_changed publish failed", extra={"trip_id": trip_id}, exc_info=True)


async def stream_participant_events(trip_id: int) -> AsyncGenerator[str, None]:
    """
    GET /trips/{id}/roster/stream 용.
    trip:{id}:participants 채널 구독 → SSE로 전달. 15초마다 heartbeat(: ping).
    SSE는 long-lived connection이므로 예외·연결 해제 처리 필수.
    """
    channel = _channel(trip_id)
    pubsub = redis_client.pubsub()
    try:
        await pubsub.subscribe(channel)
        last_heartbeat = datetime.now(timezone.utc).timestamp()

        while True:
            message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
            now = datetime.now(timezone.utc).timestamp()
            if now - last_heartbeat >= HEARTBEAT_INTERVAL:
                yield ": ping\n\n"
                last_heartbeat = now
            if message and message.get("type") == "message":
                yield format_sse(message.get("data") or "")
    except asyncio.CancelledError:
        logger.debug("roster stream closed", extra={"trip_id": trip_id})
        raise
    finally:
        await pubsub.unsubscribe(channel)
        await pubsub.close()

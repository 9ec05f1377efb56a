# User 모델

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from tripcommit.models.base import Base


class User(Base):
    """사용자 테이블. full_name이 없으면 email을 표시 이름으로 사용."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=True)
    email = Column(String(200), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

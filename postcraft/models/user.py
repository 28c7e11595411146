from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from postcraft.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)  # uuid4
    email = Column(String(255), unique=True, index=True, nullable=False)  # stored lower-cased
    name = Column(String(50), nullable=False)
    hashed_password = Column(String, nullable=False)
    plan_tier = Column(String, default="free", nullable=False)  # free -> pro, never back
    generations_count = Column(Integer, default=0, nullable=False)  # lifetime, never decreases
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

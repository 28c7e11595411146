from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from postcraft.db.base import Base


class Generation(Base):
    __tablename__ = "generations"

    id = Column(String(36), primary_key=True, index=True)  # uuid4
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    prompt = Column(Text, nullable=False)
    tone = Column(String(32), nullable=False)
    audience = Column(String(200), nullable=False)
    content_json = Column(Text, nullable=False)  # exact serialized model output
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

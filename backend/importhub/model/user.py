from sqlalchemy import Column, DateTime, Integer, String

from importhub.database import Base
from importhub.model.base import utcnow


class User(Base):
    """Owned by the users service; read here for identity and `created_by` display."""
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)      # bcrypt hash, never read by this service
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

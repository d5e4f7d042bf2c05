"""
Tenant Model
Every engine entity is scoped to exactly one tenant
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from datetime import datetime

from ideaflow.config.database import Base


class Tenant(Base):
    """Tenant model"""
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Tenant {self.slug}>"

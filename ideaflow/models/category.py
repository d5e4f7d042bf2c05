"""
Category Model
"""

from sqlalchemy import Column, Integer, String, ForeignKey

from ideaflow.config.database import Base


class Category(Base):
    """Idea category, used as a policy selection criterion"""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, index=True, nullable=False)

    def __repr__(self):
        return f"<Category {self.slug}>"

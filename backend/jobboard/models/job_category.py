from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jobboard.database import Base


class JobCategory(Base):
    """Browsable job category. job_count is maintained by the job write path, never by clients."""

    __tablename__ = "job_categories"
    __table_args__ = (CheckConstraint("job_count >= 0", name="ck_job_categories_job_count_non_negative"),)

    id = Column(String, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    slug = Column(String, unique=True, nullable=True, index=True)
    description = Column(Text, nullable=False)
    icon = Column(String, nullable=False, default="briefcase")
    job_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    jobs = relationship("Job", back_populates="category")

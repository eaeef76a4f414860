from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jobboard.database import Base


class Job(Base):
    """A posted job. slug and category_name are derived on write by the job repo."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True, index=True)
    employer_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    category_id = Column(String, ForeignKey("job_categories.id"), nullable=False, index=True)
    category_name = Column(String)
    title = Column(String, nullable=False)
    # Nullable so legacy rows can exist until the slug backfill runs.
    slug = Column(String, unique=True, nullable=True, index=True)
    description = Column(Text, nullable=False)
    company = Column(String, nullable=False)
    location = Column(String, nullable=False)
    country = Column(String, nullable=False)
    salary = Column(String)
    type = Column(String, nullable=False)  # full-time | part-time | contract | internship
    experience = Column(String)
    requirements = Column(JSON, default=list)
    responsibilities = Column(JSON, default=list)
    benefits = Column(JSON, default=list)
    tags = Column(JSON, default=list)
    logo = Column(String)
    company_description = Column(Text)
    company_size = Column(String)
    status = Column(String, default="active")  # active | closed | draft
    featured = Column(Boolean, default=False)
    posted_date = Column(DateTime(timezone=True), server_default=func.now())
    deadline = Column(DateTime(timezone=True))
    views = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employer = relationship("User", back_populates="posted_jobs")
    category = relationship("JobCategory", back_populates="jobs")
    applications = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    saved_by = relationship(
        "SavedJob",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

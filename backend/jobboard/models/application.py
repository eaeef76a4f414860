from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jobboard.database import Base


class Application(Base):
    """A user's application to a job (one per user/job pair)."""

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("user_id", "job_id", name="uq_applications_user_job"),)

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    job_id = Column(String, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    resume = Column(String, nullable=False)
    resume_file_name = Column(String)
    resume_file_type = Column(String)
    cover_letter = Column(Text)
    status = Column(String, default="pending")  # pending | reviewed | shortlisted | rejected | accepted
    applied_at = Column(DateTime(timezone=True), server_default=func.now())
    reviewed_at = Column(DateTime(timezone=True))
    notes = Column(Text)

    applicant = relationship("User", back_populates="applications")
    job = relationship("Job", back_populates="applications")

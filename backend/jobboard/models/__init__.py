from jobboard.models.user import User
from jobboard.models.job_category import JobCategory
from jobboard.models.job import Job
from jobboard.models.application import Application
from jobboard.models.saved_job import SavedJob

__all__ = [
    "User",
    "JobCategory",
    "Job",
    "Application",
    "SavedJob",
]

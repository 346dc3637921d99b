# SQLAlchemy models
from .activity import ActivityRecordRow
from .base import Base
from .catalog import LearningModule, Quiz, module_prerequisites

__all__ = [
    # Base
    "Base",
    # Catalog
    "LearningModule",
    "Quiz",
    "module_prerequisites",
    # Activity
    "ActivityRecordRow",
]

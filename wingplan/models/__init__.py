from wingplan.models.project import ProjectRecord

__all__ = [
    "ProjectRecord",
]

from wingplan.services.floor_manager import FloorManager, floor_manager
from wingplan.services.project_service import ProjectService
from wingplan.services.structural_gate import StructuralGate
from wingplan.services.structure_editor import StructureEditor
from wingplan.services.structure_validator import StructureValidator, structure_validator
from wingplan.services.wing_builder import WingBuilder, wing_builder

__all__ = [
    "FloorManager",
    "floor_manager",
    "ProjectService",
    "StructuralGate",
    "StructureEditor",
    "StructureValidator",
    "structure_validator",
    "WingBuilder",
    "wing_builder",
]

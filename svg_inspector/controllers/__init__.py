from .inspector_controller import InspectorController

__all__ = ["InspectorController"]

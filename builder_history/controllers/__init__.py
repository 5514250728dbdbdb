from builder_history.controllers.ajax import AjaxController
from builder_history.controllers.editor import EditorController

__all__ = ["AjaxController", "EditorController"]

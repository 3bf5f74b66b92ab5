"""Plain-data conversion for saving and loading projects."""

from .project_io import document_from_dict, document_to_dict, restore_selection

__all__ = ["document_from_dict", "document_to_dict", "restore_selection"]

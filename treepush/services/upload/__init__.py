"""
Upload package.

Usage: `from treepush.services.upload import UploadOrchestrator`

Module structure:
- types.py: FileEntry and UploadResult
- local_files.py: LocalFileSource, local directory enumeration
- graph_builder.py: ObjectGraphBuilder, tree and commit construction
- orchestrator.py: UploadOrchestrator, the end-to-end workflow
"""

from treepush.services.upload.graph_builder import ObjectGraphBuilder, build_tree_entries
from treepush.services.upload.local_files import LocalFileSource
from treepush.services.upload.orchestrator import UploadOrchestrator
from treepush.services.upload.types import FileEntry, UploadResult

__all__ = [
    "FileEntry",
    "LocalFileSource",
    "ObjectGraphBuilder",
    "UploadOrchestrator",
    "UploadResult",
    "build_tree_entries",
]

from .processing import (
    BatchSummary,
    ProcessingMode,
    find_instance_files,
    instance_session,
    process_directory,
    process_instance,
)

__all__ = [
    "BatchSummary",
    "ProcessingMode",
    "find_instance_files",
    "instance_session",
    "process_directory",
    "process_instance",
]

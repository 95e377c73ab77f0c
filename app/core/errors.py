"""Hard-failure error channel for the generation pipeline.

Everything raised from here propagates unchanged to the HTTP boundary, which
maps ``status_code`` onto the response. Per-diagram parse problems never use
these classes; they are collected as ``DiagramWarning`` entries instead.
"""


class GenerationError(Exception):
    """Base class for fatal pipeline failures."""
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PreconditionError(GenerationError):
    """A stage was started without the state it requires."""


class ProjectNotFoundError(PreconditionError):
    status_code = 404

    def __init__(self, project_id: int):
        super().__init__(f"Project with ID {project_id} not found")
        self.project_id = project_id


class OutputTreeMissingError(PreconditionError):
    """Packaging was requested before both target trees were built."""


class LLMInvocationError(GenerationError):
    status_code = 502


class LLMTimeoutError(LLMInvocationError):
    status_code = 504


class ProjectWriteError(GenerationError):
    """Filesystem failure while resetting, scaffolding or writing a tree."""


class ArchiveError(GenerationError):
    """Failure while streaming or finalizing the zip archive."""

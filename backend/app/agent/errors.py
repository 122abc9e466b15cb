class GenerationError(Exception):
    """Base error for calls to the text-generation backend."""


class GenerationAuthError(GenerationError):
    """No credential configured for the generation backend."""


class GenerationHttpError(GenerationError):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class GenerationShapeError(GenerationError):
    """Success response without the expected text payload."""


class GenerationFormatError(GenerationError):
    """Returned text could not be parsed as JSON."""


class PipelineError(Exception):
    """Base error for the structure/brief pipelines."""


class InvalidStructureError(PipelineError):
    pass


class StructurePersistError(PipelineError):
    pass


class NoBriefsGeneratedError(PipelineError):
    pass


class BriefPersistError(PipelineError):
    pass

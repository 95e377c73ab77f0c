from enum import Enum

class GenerationStage(str, Enum):
    FETCH_DIAGRAMS = "FETCH_DIAGRAMS"
    AGGREGATE_CONTEXT = "AGGREGATE_CONTEXT"
    ASSEMBLE_PROMPT = "ASSEMBLE_PROMPT"
    INVOKE_LLM = "INVOKE_LLM"
    PARSE_OUTPUT = "PARSE_OUTPUT"
    BUILD_PROJECT = "BUILD_PROJECT"
    PACKAGE_ARCHIVE = "PACKAGE_ARCHIVE"
    DONE = "DONE"
    FAILED = "FAILED"

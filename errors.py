"""Errors raised along the workflow.

Every request-issuing step catches `GenerationError` itself and turns it into
a message on the session, so none of these reach a Streamlit page uncaught.
"""


class WorkflowError(Exception):
    """Base workflow exception"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidFileType(WorkflowError):
    def __init__(self, message: str = "Invalid file type. Please upload a CSV or an image file."):
        super().__init__(message)


class IncompleteInput(WorkflowError):
    def __init__(self, message: str = "Please fill in all input fields to test the model."):
        super().__init__(message)


class GenerationError(WorkflowError):
    """A request to the generative service did not produce a usable answer."""


class MalformedResponse(GenerationError):
    def __init__(self, message: str = "Received invalid format from the model.", raw_text: str = ""):
        self.raw_text = raw_text
        super().__init__(message)


class ServiceError(GenerationError):
    def __init__(self, message: str = "The generative service request failed."):
        super().__init__(message)

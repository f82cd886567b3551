"""
Farm visit errors.

Each error carries the user-facing message and the machine-readable code
returned by the API when the error reaches a view.
"""


class VisitError(Exception):
    """Base class for farm visit failures surfaced to users."""
    code = 'VISIT_ERROR'
    default_message = 'Something went wrong. Please try again.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class FetchFailed(VisitError):
    code = 'FETCH_FAILED'
    default_message = 'Could not load farm visits. Please reload the page.'


class DeleteFailed(VisitError):
    code = 'DELETE_FAILED'
    default_message = 'Error deleting entry. Please try again.'


class UploadFailed(VisitError):
    code = 'UPLOAD_FAILED'
    default_message = 'Error uploading photo. Please try again.'


class SubmitFailed(VisitError):
    code = 'SUBMIT_FAILED'
    default_message = 'Error submitting form. Please try again.'


class PresentationBlocked(VisitError):
    code = 'PRESENTATION_BLOCKED'
    default_message = 'The report could not be opened. Please allow popups to download the PDF.'

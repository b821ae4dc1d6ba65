"""
Exceptions raised by the slot finder
"""


class SlotFinderError(Exception):
    """Base class for slot finder failures"""
    default_message = "Unable to find availability. Try again later."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class SearchValidationError(SlotFinderError, ValueError):
    """Search refused before any calendar lookup; fix the input and retry"""


class MissingPurposeError(SearchValidationError):
    default_message = "Please enter an event title before searching for availability."


class FreeBusyUnsupportedError(SearchValidationError):
    default_message = "Free/busy lookup is not supported for the selected calendar provider yet."


class NoParticipantsError(SearchValidationError):
    default_message = "Add at least one teammate to evaluate availability."


class NoCalendarsError(SearchValidationError):
    default_message = "Provide at least one calendar email so availability can be checked."


class FreeBusyLookupError(SlotFinderError):
    """The free/busy lookup failed; no slots are returned"""


class NoSlotsSelectedError(SlotFinderError, ValueError):
    default_message = "Select at least one slot to continue."


class HoldCreationError(SlotFinderError):
    """Creating a hold failed; `created` lists the holds made before the failure"""
    default_message = "Unable to create holds."

    def __init__(self, message: str = None, created: list = None):
        super().__init__(message)
        self.created = list(created or [])

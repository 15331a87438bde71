from typing import Optional

GENERIC_ERROR_MESSAGE = "An unknown error occurred. Please try again later."


class GenerationFailed(Exception):
    """Round content could not be produced. Carries a message fit for display."""

    default_message = GENERIC_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ContentUnavailable(GenerationFailed):
    default_message = "Image generation failed or returned an invalid format."


class InvalidContentFormat(GenerationFailed):
    default_message = "Sentence generation failed to produce a valid list."


class ServiceError(GenerationFailed):
    default_message = (
        "Failed to communicate with the AI service. "
        "Please check your connection and API key."
    )


class EmptyRound(GenerationFailed):
    default_message = "The AI failed to generate questions. Please try again."

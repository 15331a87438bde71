import asyncio
import base64
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from google import genai
from google.genai import types
from pydantic import TypeAdapter, ValidationError

from .config import settings
from .errors import (
    ContentUnavailable,
    GenerationFailed,
    InvalidContentFormat,
    ServiceError,
)
from .models import RoundContent, SentenceItem
from .scenes import SceneLibrary

logger = logging.getLogger(__name__)

SENTENCE_PROMPT = """
Analyze this image. Identify objects and their quantities. Based on your analysis, generate an array of exactly 5 sentences for an ESL grammar game.
- Each sentence must start with "There is" or "There are".
- 3 of the sentences must be factually correct descriptions of the image.
- 2 of the sentences must be factually incorrect (e.g., wrong object, wrong count).
- Ensure a good mix of singular ("There is a...") and plural ("There are...") sentences.
- The sentences should be simple and clear for English learners.
- Use only A2-level English vocabulary.
"""

SENTENCE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "sentence": types.Schema(
                type=types.Type.STRING,
                description="A sentence describing the image using 'There is' or 'There are'.",
            ),
            "isCorrect": types.Schema(
                type=types.Type.BOOLEAN,
                description="Whether the sentence is a factually correct description of the image.",
            ),
        },
        required=["sentence", "isCorrect"],
    ),
)

_sentence_list = TypeAdapter(List[SentenceItem])


def parse_sentences(raw: Optional[str]) -> List[SentenceItem]:
    """Validates the sentence step's JSON output. Length and split are not checked."""
    if not raw:
        raise InvalidContentFormat()
    try:
        sentences = _sentence_list.validate_json(raw)
    except ValidationError as e:
        logger.warning(f"Rejected sentence payload: {e.error_count()} errors")
        raise InvalidContentFormat() from e
    if not sentences:
        raise InvalidContentFormat()
    return sentences


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


# --- Strategy Pattern: Content Providers ---
class ContentProvider(ABC):
    """Produces one round of game content per call."""

    @abstractmethod
    async def request_round(self) -> RoundContent:
        pass


class GeminiContentProvider(ContentProvider):
    """Generates a scene image, then asks for labeled sentences about it."""

    def __init__(
        self,
        scene_library: SceneLibrary,
        client: Any = None,
        api_key: Optional[str] = None,
        image_model: str = settings.IMAGE_MODEL,
        text_model: str = settings.TEXT_MODEL,
        timeout: Optional[float] = settings.REQUEST_TIMEOUT_SECONDS,
    ):
        self.scene_library = scene_library
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.image_model = image_model
        self.text_model = text_model
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.api_key:
                raise ServiceError(
                    "GEMINI_API_KEY environment variable not set. "
                    "Please configure an API key and try again."
                )
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def request_round(self) -> RoundContent:
        try:
            return await asyncio.wait_for(self._generate(), timeout=self.timeout)
        except GenerationFailed:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"Round generation timed out after {self.timeout}s")
            raise ServiceError() from e
        except Exception as e:
            logger.exception("Error generating game content")
            raise ServiceError() from e

    async def _generate(self) -> RoundContent:
        scene = self.scene_library.choose()
        logger.info(f"Requesting round for scene: {scene[:60]}...")
        data, mime_type = await self._generate_image(scene)
        sentences = await self._generate_sentences(data, mime_type)
        logger.info(f"Round ready with {len(sentences)} sentences")
        return RoundContent(image=to_data_uri(data, mime_type), sentences=sentences)

    async def _generate_image(self, scene: str) -> Tuple[bytes, str]:
        response = await self.client.aio.models.generate_content(
            model=self.image_model,
            contents=scene,
            config=types.GenerateContentConfig(
                response_modalities=[types.Modality.IMAGE],
            ),
        )
        for candidate in (response.candidates or [])[:1]:
            parts = candidate.content.parts if candidate.content else None
            for part in parts or []:
                blob = part.inline_data
                if blob is not None and blob.data:
                    return blob.data, blob.mime_type or "image/png"
        raise ContentUnavailable()

    async def _generate_sentences(self, data: bytes, mime_type: str) -> List[SentenceItem]:
        response = await self.client.aio.models.generate_content(
            model=self.text_model,
            contents=[
                types.Part.from_bytes(data=data, mime_type=mime_type),
                SENTENCE_PROMPT,
            ],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=SENTENCE_SCHEMA,
            ),
        )
        return parse_sentences(response.text)

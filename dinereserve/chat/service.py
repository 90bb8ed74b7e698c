"""Chat proxy: catalog-aware replies first, the LLM only as a fallback."""

import logging

from agents import InputGuardrailTripwireTriggered, Runner
from openai import AsyncOpenAI, OpenAIError

from dinereserve.agents import AssistantAgent
from dinereserve.chat.intent import DEFAULT_CUISINES, ExtractedFilters, extract_filters
from dinereserve.config import Config
from dinereserve.errors import InvalidRequestError, UpstreamError
from dinereserve.guardrails import InputValidator
from dinereserve.models import (
    ChatMessage,
    ChatResponse,
    Restaurant,
    RestaurantMention,
    RestaurantSummary,
)
from dinereserve.services.catalog import CatalogService

logger = logging.getLogger(__name__)


class ChatService:
    """Answers chat widget messages.

    Order of attempts for the latest user message:
    1. a restaurant named in the message gets an acknowledgement with its id;
    2. recognizable booking/search details get a filtered restaurant list;
    3. anything else goes to the assistant agent.
    """

    def __init__(
        self,
        catalog: CatalogService,
        assistant: AssistantAgent,
        config: Config,
        model_client: AsyncOpenAI | None = None,
    ) -> None:
        self.catalog = catalog
        self.assistant = assistant
        self.config = config
        self._model_client = model_client

    @property
    def model_client(self) -> AsyncOpenAI:
        if self._model_client is None:
            if not self.config.has_llm_config():
                raise UpstreamError("Chat model is not configured")
            self._model_client = AsyncOpenAI(
                api_key=self.config.llm_api_key, base_url=self.config.llm_base_url
            )
        return self._model_client

    async def respond(self, messages: list[ChatMessage]) -> ChatResponse:
        """Produce a reply to the conversation so far.

        Raises:
            InvalidRequestError: If the latest user message fails validation
            UpstreamError: If the model call fails
        """
        user_messages = [m for m in messages if m.role == "user"]
        text = user_messages[-1].content if user_messages else ""

        is_valid, error = InputValidator.validate_user_input(text)
        if not is_valid:
            raise InvalidRequestError(error)

        restaurants = [r for r in self.catalog.list_restaurants() if r.is_bookable]

        mentioned = self._find_mentioned(text, restaurants)
        if mentioned is not None:
            logger.info(f"Chat mentioned restaurant {mentioned.id}")
            return ChatResponse(
                reply=f"Would you like to view more about {mentioned.name}?",
                source="mention",
                restaurant=RestaurantMention(id=mentioned.id, name=mentioned.name),
            )

        cuisines = {r.cuisine for r in restaurants} | set(DEFAULT_CUISINES)
        filters = extract_filters(text, cuisines)
        if filters.has_any():
            return self._listing(filters, restaurants)

        return await self._ask_model(messages)

    async def list_models(self) -> list[str]:
        """List model ids available upstream.

        Raises:
            UpstreamError: If the upstream call fails
        """
        try:
            return [model.id async for model in self.model_client.models.list()]
        except OpenAIError as e:
            logger.exception("Failed to list upstream models")
            raise UpstreamError(f"Failed to list models: {e}") from e

    @staticmethod
    def _find_mentioned(text: str, restaurants: list[Restaurant]) -> Restaurant | None:
        lowered = text.lower()
        for restaurant in restaurants:
            if restaurant.name.lower() in lowered:
                return restaurant
        return None

    def _listing(
        self, filters: ExtractedFilters, restaurants: list[Restaurant]
    ) -> ChatResponse:
        logger.info(f"Chat intent filters: {filters.model_dump(exclude_none=True)}")

        if filters.party_size is not None:
            is_valid, error = InputValidator.validate_party_size(filters.party_size)
            if not is_valid:
                return ChatResponse(reply=error, source="search")

        matches = restaurants
        if filters.cuisine:
            matches = [r for r in matches if filters.cuisine.lower() in r.cuisine.lower()]
        if filters.city:
            matches = [r for r in matches if filters.city.lower() in r.address.city.lower()]

        if not matches:
            return ChatResponse(
                reply="Sorry, no restaurants match your criteria.", source="search"
            )

        heading = "Here are some available restaurants"
        if filters.city:
            heading += f" in {filters.city}"
        if filters.cuisine:
            heading += f" serving {filters.cuisine} cuisine"
        lines = [f"- {r.name} ({r.cuisine}, {r.address.city})" for r in matches]

        return ChatResponse(
            reply=heading + ":\n" + "\n".join(lines),
            source="search",
            restaurants=[
                RestaurantSummary(
                    id=r.id, name=r.name, cuisine=r.cuisine, city=r.address.city
                )
                for r in matches
            ],
        )

    async def _ask_model(self, messages: list[ChatMessage]) -> ChatResponse:
        try:
            agent = self.assistant.create()
        except ValueError as e:
            raise UpstreamError(str(e)) from e

        conversation = [
            {"role": m.role, "content": m.content}
            for m in messages
            if m.role in ("user", "assistant")
        ]

        try:
            result = await Runner.run(agent, input=conversation)
        except InputGuardrailTripwireTriggered as e:
            raise InvalidRequestError(
                str(e.guardrail_result.output.output_info)
            ) from e
        except Exception as e:
            logger.exception("Assistant agent run failed")
            raise UpstreamError("Failed to get a response from the assistant") from e

        return ChatResponse(reply=str(result.final_output), source="llm")

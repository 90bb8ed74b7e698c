"""Chat assistant agent that answers DineReserve questions using the catalog."""

import logging
from datetime import datetime

from agents import (
    Agent,
    ModelSettings,
    OpenAIChatCompletionsModel,
    function_tool,
    set_tracing_disabled,
)
from openai import AsyncOpenAI

from dinereserve.config import Config, get_config
from dinereserve.models import SearchFilter
from dinereserve.prompts import load_prompt
from dinereserve.services.catalog import CatalogService

logger = logging.getLogger(__name__)


def build_search_tool(catalog: CatalogService):
    """Wrap catalog search as a function tool bound to this catalog."""

    @function_tool
    def search_restaurants(
        cuisine: str | None = None, location: str | None = None
    ) -> dict:
        """Search bookable restaurants.

        Args:
            cuisine: Cuisine to match, e.g. "Italian" (optional)
            location: City, state or zip code to match (optional)

        Returns:
            Dictionary with the matching restaurants
        """
        logger.info(f"Assistant searching: cuisine={cuisine}, location={location}")
        results = catalog.search(SearchFilter(cuisine=cuisine, location=location))
        return {
            "count": len(results),
            "restaurants": [
                {
                    "id": r.id,
                    "name": r.name,
                    "cuisine": r.cuisine,
                    "city": r.address.city,
                    "price_range": r.price_range,
                    "rating": r.rating,
                }
                for r in results
            ],
        }

    return search_restaurants


class AssistantAgent:
    """DineReserve chat assistant backed by an OpenAI-compatible chat model.

    Attributes:
        catalog: Catalog the search tool reads from
        config: Application configuration
        input_guardrails: Guardrails run before the model sees a message
        _agent: The underlying Agent instance (created lazily)
    """

    def __init__(
        self,
        catalog: CatalogService,
        config: Config | None = None,
        input_guardrails: list | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or get_config()
        self.input_guardrails = input_guardrails or []
        self._agent: Agent | None = None

        logger.info("AssistantAgent initialized")

    def create(self) -> Agent:
        """Create and return the configured assistant agent.

        Raises:
            ValueError: If no LLM API key is configured
        """
        if self._agent is None:
            if not self.config.has_llm_config():
                raise ValueError("LLM is not configured")

            # Traces would be exported to OpenAI, which we don't talk to.
            set_tracing_disabled(True)

            client = AsyncOpenAI(
                api_key=self.config.llm_api_key, base_url=self.config.llm_base_url
            )
            instructions = load_prompt(
                "assistant_agent",
                current_date=datetime.now().strftime("%A, %B %d, %Y"),
            )

            self._agent = Agent(
                name="DineReserve Assistant",
                model=OpenAIChatCompletionsModel(
                    model=self.config.llm_model, openai_client=client
                ),
                model_settings=ModelSettings(temperature=self.config.llm_temperature),
                instructions=instructions,
                tools=[build_search_tool(self.catalog)],
                input_guardrails=self.input_guardrails,
            )
            logger.info(f"Assistant agent created with model {self.config.llm_model}")

        return self._agent

    @property
    def agent(self) -> Agent:
        return self.create()

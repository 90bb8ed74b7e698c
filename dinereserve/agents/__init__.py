"""DineReserve agents using OpenAI Agents SDK."""

from dinereserve.agents.assistant_agent import AssistantAgent, build_search_tool

__all__ = ["AssistantAgent", "build_search_tool"]

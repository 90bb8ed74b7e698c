"""Command-line chat client for DineReserve - HTTP client for the chat endpoint."""

import logging
import sys

import httpx

from dinereserve.config import get_config, setup_logging

logger = logging.getLogger(__name__)


class ChatCLI:
    """Terminal version of the DineReserve chat widget."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        self.config = get_config()
        setup_logging(self.config)
        self.client = client or httpx.Client(
            base_url=self.config.server_url, timeout=60.0
        )
        # Full conversation, resent on every turn like the widget does.
        self.messages: list[dict] = []

        logger.info(f"Chat CLI connected to {self.config.server_url}")

    def run(self) -> None:
        """Run the interactive loop."""
        print("\n" + "=" * 60)
        print("DINERESERVE - Restaurant Assistant")
        print("=" * 60 + "\n")
        print("Examples:")
        print('  "Mexican food in San Francisco"')
        print('  "Table for 4 tomorrow at 7pm"')
        print('  "Tell me about Sushi Ran"\n')
        print("Type 'quit' or 'exit' to end the session.\n")

        while True:
            try:
                user_input = input("\nYou: ").strip()

                if not user_input:
                    continue

                if user_input.lower() in ["quit", "exit", "q"]:
                    print("\nGoodbye!")
                    break

                reply = self.send(user_input)
                if reply:
                    print(f"\nAssistant: {reply}")

            except KeyboardInterrupt:
                print("\n\nGoodbye!")
                break

    def send(self, text: str) -> str | None:
        """Send one message and return the assistant's reply.

        Failed turns are reported and dropped from the conversation.
        """
        self.messages.append({"role": "user", "content": text})

        try:
            response = self.client.post("/api/llm", json={"messages": self.messages})
        except httpx.ConnectError:
            logger.exception("Cannot connect to server")
            print(f"\n⚠ Cannot connect to server at {self.config.server_url}")
            print("Make sure the server is running:")
            print("  dinereserve-server")
            self.messages.pop()
            return None
        except httpx.HTTPError as e:
            logger.error(f"Chat request failed: {e}", exc_info=True)
            print(f"\n⚠ Request failed: {e}")
            self.messages.pop()
            return None

        if response.is_error:
            error_data = (
                response.json()
                if response.headers.get("content-type", "").startswith(
                    "application/json"
                )
                else {}
            )
            error_msg = error_data.get("error") or error_data.get("detail") or response.text
            print(f"\n⚠ Server error (status {response.status_code}): {error_msg}")
            self.messages.pop()
            return None

        result = response.json()
        reply = result["reply"]
        self.messages.append({"role": "assistant", "content": reply})

        mention = result.get("restaurant")
        if mention:
            reply += f"\n  (restaurant id: {mention['id']})"
        return reply


def main() -> None:
    """Main entry point for the CLI."""
    try:
        get_config()
    except Exception as e:
        print(f"Configuration error: {e}")
        print("\nCheck your .env file or environment variables.")
        sys.exit(1)

    cli = ChatCLI()
    cli.run()


if __name__ == "__main__":
    main()

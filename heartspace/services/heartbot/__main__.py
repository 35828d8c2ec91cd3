"""
HeartSpace - Terminal Chat
Interactive terminal interface for chatting with HeartBot in-process.

Run with: python3 -m heartspace.services.heartbot [--no-delay] [--seed N]
"""
import argparse
import asyncio
import random
import sys

from heartspace.common.errors import HeartSpaceError
from heartspace.config import get_config
from heartspace.services.heartbot.engine import ChatSession, ResponseSelector, TurnOrchestrator
from heartspace.services.heartbot.topics import SUGGESTED_PROMPTS

CYAN = "\033[36m"
GREEN = "\033[32m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"
CLEAR_LINE = "\r\033[K"


class TerminalChat:
    def __init__(self, no_delay: bool = False, seed=None):
        cfg = get_config().heartbot
        rng = random.Random(seed)
        self.orchestrator = TurnOrchestrator(
            selector=ResponseSelector(rng=rng),
            min_delay=0.0 if no_delay else cfg.min_delay,
            max_delay=0.0 if no_delay else cfg.max_delay,
            rng=rng,
        )
        self.session = ChatSession()

    async def send(self, text):
        print(f"{DIM}  [HeartBot is thinking...]{RESET}", end="", flush=True)
        try:
            _, reply = await self.orchestrator.submit_user_message(self.session, text)
        finally:
            print(CLEAR_LINE, end="", flush=True)
        print(f"{CYAN}{BOLD}HEARTBOT:{RESET} {CYAN}{reply.content}{RESET}\n")

    async def run(self):
        print(f"{BOLD}{'='*50}{RESET}")
        print(f"{CYAN}{BOLD}  HEARTBOT // HEARTSPACE{RESET}")
        print(f"{DIM}  Terminal Chat Interface{RESET}")
        print(f"{DIM}  Type 'quit' or Ctrl+C to exit{RESET}")
        print(f"{BOLD}{'='*50}{RESET}")
        print()
        print(f"{DIM}Try asking me about:{RESET}")
        for prompt in SUGGESTED_PROMPTS:
            print(f"{DIM}  - {prompt}{RESET}")
        print()

        welcome = self.session.transcript.messages[0]
        print(f"{CYAN}{BOLD}HEARTBOT:{RESET} {CYAN}{welcome.content}{RESET}\n")

        loop = asyncio.get_running_loop()
        try:
            while True:
                try:
                    user_input = await loop.run_in_executor(None, input, f"{GREEN}{BOLD}YOU:{RESET} ")
                except EOFError:
                    break

                if not user_input.strip():
                    continue
                if user_input.strip().lower() in ("quit", "exit", "q"):
                    break

                try:
                    await self.send(user_input.strip())
                except HeartSpaceError as e:
                    print(f"{DIM}[{e.title}: {e}]{RESET}")

        except KeyboardInterrupt:
            print(f"\n{DIM}[disconnected]{RESET}")

        print(f"\n{CYAN}Take care of yourself. Goodbye!{RESET}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Chat with HeartBot in your terminal")
    parser.add_argument("--no-delay", action="store_true", help="Reply instantly instead of simulating typing")
    parser.add_argument("--seed", type=int, default=None, help="Seed the reply picker for repeatable chats")
    args = parser.parse_args(argv)

    asyncio.run(TerminalChat(no_delay=args.no_delay, seed=args.seed).run())
    return 0


if __name__ == "__main__":
    sys.exit(main())

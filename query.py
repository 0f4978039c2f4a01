#!/usr/bin/env python3
"""Ad hoc query runner for the Recipe Assistant.

Run queries directly without starting the full API server.

Usage:
    python query.py "Something quick with chicken"
    python query.py --debug "How do I make carbonara?"  # Show full JSON response
    python query.py --stateless "Your query"  # No session history
    python query.py --user alice "Your query"  # Persist generated recipes for a user

Features:
- Direct agent execution via arun()
- Formatted markdown response
- Debug mode to display full JSON with all fields
- Waits for background recipe saves before exiting
"""

import asyncio
import sys
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown

from src.agents.agent import initialize_recipe_agent
from src.utils.deadline import pending_background_tasks
from src.utils.logger import logger

console = Console()


def extract_response_text(response) -> str:
    """Extract markdown response text from agent response object.

    Args:
        response: Agent run output, dict, or other

    Returns:
        Extracted response text or empty string if not found
    """
    if hasattr(response, "content") and response.content:
        if isinstance(response.content, str):
            return response.content
        if isinstance(response.content, dict) and "response" in response.content:
            return response.content["response"]

    if isinstance(response, dict):
        return response.get("content") or response.get("response") or ""

    return str(response) if response else ""


async def _run(query: str, stateless: bool, user_id: Optional[str]):
    agent, _ = initialize_recipe_agent(use_db=not stateless)
    logger.info(f"Running query: {query}")
    logger.info("---")
    response = await agent.arun(input=query, user_id=user_id)

    # Recipe saves are detached from the tool call; let them land before the loop closes
    pending = pending_background_tasks()
    if pending:
        logger.info(f"Waiting for {len(pending)} background task(s)...")
        await asyncio.gather(*pending, return_exceptions=True)
    return response


def run_query(query: str, debug: bool = False, stateless: bool = False, user_id: Optional[str] = None) -> None:
    """Execute a single ad hoc query and print the response.

    Args:
        query: The user query to send to the agent.
        debug: If True, display full JSON response with all fields.
        stateless: If True, disable session persistence (no history).
        user_id: Optional user id; generated recipes are saved only when set.
    """
    try:
        logger.info(f"Initializing agent (stateless={stateless})...")
        response = asyncio.run(_run(query, stateless, user_id))

        logger.info("---")
        console.print()

        if debug:
            console.print("[bold cyan]Debug Mode: Full Response[/bold cyan]")
            console.print("[dim]" + "=" * 60 + "[/dim]")
            response_dict = response.to_dict() if hasattr(response, "to_dict") else response.__dict__
            console.print_json(data=response_dict, default=str)
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print()

        response_text = extract_response_text(response)
        if response_text:
            console.print(Markdown(response_text))
        else:
            console.print("[yellow]No response text found[/yellow]")

    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Query execution failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python query.py [--debug] [--stateless] [--user ID] \"<your query>\"")
        print("")
        print("Examples:")
        print("  python query.py \"Something quick with chicken\"")
        print("  python query.py --debug \"How do I make spaghetti carbonara?\"")
        print("  python query.py --user alice \"Show me a vegetarian curry\"")
        sys.exit(1)

    debug_mode = False
    stateless_mode = False
    user_id = None
    argv_start = 1

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        if sys.argv[argv_start] == "--debug":
            debug_mode = True
            argv_start += 1
        elif sys.argv[argv_start] == "--stateless":
            stateless_mode = True
            argv_start += 1
        elif sys.argv[argv_start] == "--user":
            argv_start += 1
            if argv_start >= len(sys.argv):
                print("Error: --user flag requires an id")
                sys.exit(1)
            user_id = sys.argv[argv_start]
            argv_start += 1
        else:
            print(f"Unknown flag: {sys.argv[argv_start]}")
            sys.exit(1)

    if argv_start >= len(sys.argv):
        print("Error: No query provided")
        print("Usage: python query.py [--debug] [--stateless] [--user ID] \"<your query>\"")
        sys.exit(1)

    query = " ".join(sys.argv[argv_start:])
    run_query(query, debug=debug_mode, stateless=stateless_mode, user_id=user_id)

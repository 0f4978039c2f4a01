"""AgentOS Application - Recipe Assistant.

Single entry point for the complete recipe assistant:
- Builds the resolvers (images, videos, recipe search and details) once
- Configures the Agno Agent with the recipe tools and tool-hooks
- Mounts the /api image and video endpoints on the same FastAPI app
- Serves chat REST API and Web UI automatically via AgentOS

Run with: python app.py
"""

from agno.os import AgentOS
from fastapi import FastAPI

from src.agents.agent import build_services, initialize_recipe_agent
from src.api.routes import create_api_router
from src.utils.config import config
from src.utils.logger import logger

# Resolvers and caches are process-wide: the agent tools and the HTTP routes share them
services = build_services()
agent, _ = initialize_recipe_agent(services=services)

base_app = FastAPI(
    title="Recipe Assistant",
    description="Conversational recipe assistant with image and video resolution endpoints",
)
base_app.include_router(create_api_router(services))
logger.info("✓ Image and video endpoints mounted under /api")

agent_os = AgentOS(
    id="recipe-assistant",
    description="Recipe Assistant",
    agents=[agent],
    base_app=base_app,
)
app = agent_os.get_app()


if __name__ == "__main__":
    logger.info(f"Starting Recipe Assistant on port {config.PORT}")
    logger.info(f"API docs available at: http://localhost:{config.PORT}/docs")
    agent_os.serve(app="app:app", port=config.PORT)

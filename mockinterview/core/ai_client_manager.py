"""
AI Client Manager

This module owns the AsyncOpenAI client instances used to reach the hosted
text-generation service. Clients are created lazily from Settings on first
access and reused for the lifetime of the process. Conversational interviews
and question generation get separate client instances.
"""

import threading
from typing import Dict, Optional
from openai import AsyncOpenAI
from loguru import logger
from mockinterview.core.config import Settings, get_settings

CONVERSATION = "conversation"
QUESTION_GENERATION = "question_generation"
SERVICE_TYPES = (CONVERSATION, QUESTION_GENERATION)


class AIClientManager:
    """
    Manages dedicated AsyncOpenAI clients per service type.

    The service is reached through its OpenAI-compatible endpoint, so the base
    URL, API key and request timeout all come from Settings.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._clients: Dict[str, AsyncOpenAI] = {}
        self._initialized = False
        self._lock = threading.Lock()

    def _initialize_clients(self):
        """Lazy initialization of client instances."""
        if self._initialized:
            return

        with self._lock:
            # Double-check locking for initialization
            if self._initialized:
                return

            if not self._settings.ai_api_key:
                raise RuntimeError(
                    "AI_API_KEY environment variable is not set. "
                    "Please set it in your .env file or environment variables."
                )

            try:
                self._clients = {
                    service_type: AsyncOpenAI(
                        base_url=self._settings.ai_base_url,
                        api_key=self._settings.ai_api_key,
                        timeout=self._settings.ai_timeout_seconds,
                        max_retries=0,
                    )
                    for service_type in SERVICE_TYPES
                }
                self._initialized = True
                logger.info(f"Initialized {len(self._clients)} AI client instances for {self._settings.ai_base_url}")
            except Exception as e:
                logger.error(f"Failed to initialize AI clients: {e}")
                raise RuntimeError(f"Failed to initialize AI clients: {e}") from e

    def get_client(self, service_type: str) -> AsyncOpenAI:
        """
        Get the dedicated client for a service type.

        Args:
            service_type (str): One of "conversation" or "question_generation".

        Returns:
            AsyncOpenAI: Client instance for the service.

        Raises:
            ValueError: If service_type is not supported.
            RuntimeError: If the clients could not be created.
        """
        if service_type not in SERVICE_TYPES:
            raise ValueError(f"Unsupported service type: {service_type}. Available: {list(SERVICE_TYPES)}")

        self._initialize_clients()
        return self._clients[service_type]

    def get_conversation_client(self) -> AsyncOpenAI:
        return self.get_client(CONVERSATION)

    def get_question_generation_client(self) -> AsyncOpenAI:
        return self.get_client(QUESTION_GENERATION)


_ai_manager: Optional[AIClientManager] = None
_manager_lock = threading.Lock()


def get_ai_client_manager() -> AIClientManager:
    """
    Get the process-wide AIClientManager, creating it on first call.

    Returns:
        AIClientManager: The shared instance
    """
    global _ai_manager

    if _ai_manager is None:
        with _manager_lock:
            # Double-check locking pattern
            if _ai_manager is None:
                _ai_manager = AIClientManager(get_settings())

    return _ai_manager

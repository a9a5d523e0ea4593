"""
Description: 
This module sets up a rate limiter for the application using SlowAPI.
Clients are identified by IP address. Generation routes use the tighter
AI_RATE_LIMIT because each call reaches the paid text-generation service.

Dependencies:
- slowapi: For rate limiting functionality.
- slowapi.util: For utility functions like get_remote_address to retrieve the client's IP address.
- loguru: For logging information about the rate limiter initialization.

Author: @kcaparas1630
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from loguru import logger
from mockinterview.core.config import get_settings

_settings = get_settings()

AI_RATE_LIMIT = _settings.ai_rate_limit

limiter = Limiter(key_func=get_remote_address, default_limits=[_settings.default_rate_limit])
logger.info(f"Rate limiter initialized (default {_settings.default_rate_limit}, generation {AI_RATE_LIMIT})")

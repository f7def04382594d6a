# resumelens/extensions.py
import logging
from openai import OpenAI

from resumelens.services.ai import ResumeAI
from resumelens.services.store import MemoryStore

logger = logging.getLogger(__name__)

# 1) Small factory to build an OpenAI client from config
def init_openai(config):
    api_key = config.get("OPENAI_API_KEY")
    if not api_key:
        logger.warning("OPENAI_API_KEY not configured. AI calls will fail until it is set.")
        return None
    # request timeouts belong to the transport, not the pipeline
    return OpenAI(api_key=api_key, timeout=config.get("OPENAI_TIMEOUT", 60))

# 2) The AI collaborators, wrapped around that client
def init_resume_ai(config, client=None):
    return ResumeAI(
        client,
        model=config.get("OPENAI_MODEL", "gpt-4o"),
        max_tokens=config.get("OPENAI_MAX_TOKENS", 4096),
    )

# 3) Process-wide record store; lives as long as the app does
def init_store():
    return MemoryStore()

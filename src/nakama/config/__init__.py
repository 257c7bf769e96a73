"""Application configuration"""

import logging
from dotenv import load_dotenv

from .loader import load_raw_config
from .core import Core
from .guild import Guild
from .local_llm import LocalLLM

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=logging.INFO)
logging.getLogger("httpx").setLevel(logging.WARNING)

_RAW_CONFIG = load_raw_config()

local_llm = LocalLLM(_RAW_CONFIG)
core = Core(_RAW_CONFIG, use_local=local_llm.USE_LOCAL)
guild = Guild(_RAW_CONFIG)


class Config:
    core = core
    guild = guild
    local_llm = local_llm


__all__ = ["core", "guild", "local_llm", "Config"]

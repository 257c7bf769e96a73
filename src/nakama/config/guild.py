import os

from .loader import section


class Guild:
    """Channel names and limits for the welcome and self-role features."""

    def __init__(self, config: dict | None = None) -> None:
        guild_cfg = section(config, "guild")

        self.WELCOME_CHANNEL: str = str(
            guild_cfg.get("welcome_channel", os.getenv("WELCOME_CHANNEL", "👋-welcome"))
        )
        self.SELF_ROLES_CHANNEL: str = str(
            guild_cfg.get("self_roles_channel", os.getenv("SELF_ROLES_CHANNEL", "😋-self-roles"))
        )
        self.SELECTION_TITLE: str = str(guild_cfg.get("selection_title", "Role Selection"))

        # How many recent messages to scan for a prior selection announcement.
        self.HISTORY_SCAN_LIMIT: int = int(
            guild_cfg.get("history_scan_limit", os.getenv("HISTORY_SCAN_LIMIT", "10"))
        )
        # Seconds a user has to answer a verification question.
        self.ANSWER_TIMEOUT: float = float(
            guild_cfg.get("answer_timeout", os.getenv("ANSWER_TIMEOUT", "300"))
        )

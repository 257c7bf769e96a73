import os

from .loader import section


class Core:
    def __init__(self, config: dict | None = None, *, use_local: bool = False) -> None:
        discord_cfg = section(config, "discord")
        models_cfg = section(config, "models")

        token_env = str(discord_cfg.get("token_env", "DISCORD_API_TOKEN"))
        openai_env = str(discord_cfg.get("openai_key_env", "OPENAI_API_KEY"))

        self.DISCORD_API_TOKEN: str | None = os.getenv(token_env)
        self.OPENAI_API_KEY: str | None = os.getenv(openai_env)

        self.QUESTION_MODEL_ID: str = str(
            models_cfg.get("question_model") or os.getenv("QUESTION_MODEL_ID", "gpt-4o-mini")
        )
        # Upper bound (seconds) on a single question-generation request.
        self.QUESTION_TIMEOUT: float = float(
            models_cfg.get("question_timeout", os.getenv("QUESTION_TIMEOUT", "20"))
        )

        required = [(token_env, self.DISCORD_API_TOKEN)]
        if not use_local:
            required.append((openai_env, self.OPENAI_API_KEY))
        missing = [name for name, val in required if not val]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")

"""Entry point — wires Config → analysis backend → CaptureCycle → TelegramClient."""
import logging

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI
from rich.logging import RichHandler

from routecam.analysis.claude import ClaudeAnalysisClient
from routecam.analysis.client import AnalysisClient
from routecam.analysis.openai import OpenAIAnalysisClient
from routecam.config import Config
from routecam.constants import MSG_BOT_STARTING
from routecam.imaging.normalizer import ImageNormalizer
from routecam.pipeline import CaptureCycle
from routecam.telegram.client import TelegramClient


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def build_analysis_client(config: Config) -> AnalysisClient:
    match (config.openai_api_key, config.anthropic_api_key):
        case (str() as k, _) if k:
            return OpenAIAnalysisClient(AsyncOpenAI(api_key=k), model=config.analysis_model)
        case (_, str() as k) if k:
            return ClaudeAnalysisClient(AsyncAnthropic(api_key=k), model=config.analysis_model)
        case _:
            raise ValueError("no analysis backend configured")


def build_cycle(config: Config) -> CaptureCycle:
    return CaptureCycle(
        normalizer=ImageNormalizer(config.target_width, config.jpeg_quality),
        analysis_client=build_analysis_client(config),
        route_color=config.route_color,
        request_timeout=config.request_timeout,
    )


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_BOT_STARTING)
    logger.info("Analysis backend: %s (%s)", config.provider, config.analysis_model)

    client = TelegramClient(config, build_cycle(config))
    client.run()


if __name__ == "__main__":
    main()

"""Closet Buddy app bootstrap."""

import logging

from closet_app.config import EngineConfig
from closet_app.logging_config import configure_logging, get_logger, log_event
from memory.user_preferences import PreferenceStore
from server.outfit_service import OutfitService
from tools.ai_client import StyleAIClient, build_text_service
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStore

LOGGER = get_logger(__name__)


class ClosetBuddyApp:
    """Wires together the stores, the AI client and the outfit service."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        wardrobe_store: WardrobeStore | None = None,
        preference_store: PreferenceStore | None = None,
    ) -> None:
        self.config = config or EngineConfig.from_env()
        configure_logging()

        self.wardrobe_store = wardrobe_store or SQLiteWardrobeStore(self.config.wardrobe_db_path)
        self.preference_store = preference_store or PreferenceStore(self.config.preferences_dir)
        self.ai_client = StyleAIClient(build_text_service(self.config))
        self.outfit_service = OutfitService(
            wardrobe_store=self.wardrobe_store,
            preference_store=self.preference_store,
            ai_client=self.ai_client,
            config=self.config,
        )
        log_event(
            LOGGER,
            logging.INFO,
            "app_initialised",
            ai_provider=self.config.ai_provider,
            ai_available=self.ai_client.available,
            environment=self.config.environment or "local",
        )


__all__ = ["ClosetBuddyApp"]

"""User preferences: settings, onboarding-seen flag and theme, each persisted on change."""
import logging

from pydantic import ValidationError

from cybershield.core.errors import InvalidArgumentError
from cybershield.schemas.progress import Theme, UserSettings
from cybershield.services.state_store import ONBOARDING_KEY, SETTINGS_KEY, THEME_KEY, StateStore

logger = logging.getLogger(__name__)

DEFAULT_THEME = Theme.DARK


class PreferencesService:
    def __init__(self, store: StateStore) -> None:
        self._store = store
        self.settings = store.load_model(SETTINGS_KEY, UserSettings) or UserSettings()

    def get_settings(self) -> UserSettings:
        return self.settings

    def update_settings(self, **changes) -> UserSettings:
        """Merge a partial update; keys may be snake_case or camelCase."""
        known = set(UserSettings.model_fields)
        aliases = {f.alias: name for name, f in UserSettings.model_fields.items() if f.alias}
        normalized = {}
        for key, value in changes.items():
            name = aliases.get(key, key)
            if name not in known:
                raise InvalidArgumentError(f"Unknown setting: {key}")
            normalized[name] = value

        merged = self.settings.model_dump() | normalized
        try:
            updated = UserSettings.model_validate(merged)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid settings: {e.error_count()} errors") from e
        self.settings = updated
        self._store.save_model(SETTINGS_KEY, updated)
        return updated

    def reset_settings(self) -> UserSettings:
        self.settings = UserSettings()
        self._store.save_model(SETTINGS_KEY, self.settings)
        return self.settings

    def has_seen_onboarding(self) -> bool:
        return bool(self._store.get(ONBOARDING_KEY))

    def mark_onboarding_seen(self) -> None:
        self._store.put(ONBOARDING_KEY, True)

    def clear_onboarding(self) -> None:
        self._store.delete(ONBOARDING_KEY)

    def get_theme(self) -> Theme:
        stored = self._store.get(THEME_KEY)
        try:
            return Theme(stored) if stored is not None else DEFAULT_THEME
        except ValueError:
            logger.warning(f"[Preferences] ignoring unknown theme {stored!r}")
            return DEFAULT_THEME

    def set_theme(self, theme: Theme | str) -> Theme:
        try:
            theme = Theme(theme)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown theme: {theme}") from e
        self._store.put(THEME_KEY, theme.value)
        return theme

"""Session view-model: the single owner of the displayed fact."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable

from ..facts.errors import FactAPIError
from ..facts.models import Fact, FactCategory, TranslationLanguage
from ..facts.provider import FactProvider, parse_category
from ..speech.speaker import Speaker
from ..storage.preferences import DEFAULT_BACKGROUND_COLOR, is_hex_color
from ..translation.translator import Translator, fallback_translation
from .history import LIVE, FactHistory

if TYPE_CHECKING:
    from ..logging import JSONLLogger
    from ..storage.preferences import PreferencesStore

logger = logging.getLogger(__name__)

Observer = Callable[["FactSession"], None]


class FactSession:
    """Orchestrates fetching, navigation, favorites, translation and speech.

    All state lives on one event loop. Advance and category changes are
    serialized by a lock, so overlapping calls run one after the other.
    Retreat is synchronous and does nothing while a fetch is in flight.
    """

    FETCH_ERROR_MESSAGE = (
        "Failed to load fact. Please check your internet connection and try again."
    )
    TRANSLATION_FALLBACK_MESSAGE = "Translation unavailable. Showing the original text."
    SHARE_TEMPLATE = "Did you know? {text}\n\nShared from Fact Up!"

    def __init__(
        self,
        provider: FactProvider,
        translator: Translator,
        speaker: Speaker,
        preferences: PreferencesStore | None = None,
        event_log: JSONLLogger | None = None,
        category: FactCategory = FactCategory.GENERAL,
        prefetch: bool = True,
    ) -> None:
        self.provider = provider
        self.translator = translator
        self.speaker = speaker
        self.preferences = preferences
        self.event_log = event_log
        self.prefetch_enabled = prefetch

        self.current_fact: Fact | None = None
        self.favorites: list[Fact] = []
        self.selected_category = category
        self.background_color = DEFAULT_BACKGROUND_COLOR
        self.is_loading = False
        self.error_message: str | None = None
        self.is_translating = False
        self.is_speaking = False

        self._history = FactHistory()
        self._next_fact: Fact | None = None
        self._prefetch_task: asyncio.Task | None = None
        self._speech_task: asyncio.Task | None = None
        self._generation = 0
        self._advance_lock = asyncio.Lock()
        self._observers: list[Observer] = []

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call ``observer`` after every state change. Returns an unsubscriber."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            observer(self)

    @property
    def history(self) -> tuple[Fact, ...]:
        return self._history.facts

    @property
    def history_cursor(self) -> int:
        return self._history.cursor

    @property
    def next_fact(self) -> Fact | None:
        return self._next_fact

    @property
    def is_current_fact_translated(self) -> bool:
        return self.current_fact is not None and self.current_fact.translated_text is not None

    @property
    def current_translation_language(self) -> TranslationLanguage | None:
        if self.current_fact is None or self.current_fact.translation_language is None:
            return None
        try:
            return TranslationLanguage(self.current_fact.translation_language)
        except ValueError:
            return None

    def load_preferences(self) -> None:
        """Restore favorites and background color from the store."""
        if self.preferences is None:
            return
        self.favorites = self.preferences.load_favorites()
        self.background_color = self.preferences.load_background_color()
        self._notify()

    async def start(self) -> None:
        """Load preferences and the first fact."""
        self.load_preferences()
        await self.advance()

    async def aclose(self) -> None:
        """Stop speech and drop any pending pre-fetch."""
        self.stop_speaking()
        task = self._cancel_prefetch()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def advance(self) -> None:
        """Show the next fact, using the pre-fetched one when available."""
        async with self._advance_lock:
            await self._load_fact(push_current=True)

    def retreat(self) -> bool:
        """Step back through history. Returns True if the displayed fact changed."""
        if self.is_loading:
            return False

        fact = self._history.retreat(self.current_fact)
        if fact is None:
            return False

        annotated = self._annotate_favorite(fact)
        if annotated.is_favorite != fact.is_favorite:
            self._history.replace_current(annotated)
        self.current_fact = annotated
        self._notify()
        return True

    def can_retreat(self) -> bool:
        return self._history.can_retreat()

    async def change_category(self, category: FactCategory | str) -> None:
        """Switch category, discarding history and any pre-fetched fact."""
        if not isinstance(category, FactCategory):
            category = parse_category(category)

        async with self._advance_lock:
            self.selected_category = category
            self._generation += 1
            self._cancel_prefetch()
            self._next_fact = None
            self._history.clear()
            if self.event_log:
                self.event_log.log("category_changed", category=category.value)
            await self._load_fact(push_current=False)

    def clear_history(self) -> None:
        self._history.clear()
        self._notify()

    async def _load_fact(self, push_current: bool) -> None:
        self.is_loading = True
        self.error_message = None
        self._notify()

        if push_current and self.current_fact is not None and self._history.cursor == LIVE:
            self._history.push(self.current_fact)

        started = time.monotonic()
        try:
            fact = self._take_prefetched()
            prefetched = fact is not None
            if fact is None:
                fact = await self.provider.fetch_by_category(self.selected_category)
        except FactAPIError as e:
            logger.warning("Failed to load %s fact: %s", self.selected_category.value, e)
            if self.event_log:
                self.event_log.log_fetch_failed(self.selected_category.value, str(e))
            self.error_message = self.FETCH_ERROR_MESSAGE
            self.current_fact = None
            self._history.return_to_live()
        else:
            self.current_fact = self._annotate_favorite(fact)
            self._history.return_to_live()
            if self.event_log:
                self.event_log.log_fact_loaded(
                    self.selected_category.value,
                    fact.text,
                    prefetched=prefetched,
                    duration_ms=(time.monotonic() - started) * 1000,
                )
            self._schedule_prefetch()
        finally:
            self.is_loading = False
            self._notify()

    def _take_prefetched(self) -> Fact | None:
        self._cancel_prefetch()
        fact, self._next_fact = self._next_fact, None
        return fact

    def _cancel_prefetch(self) -> asyncio.Task | None:
        task, self._prefetch_task = self._prefetch_task, None
        if task is not None and not task.done():
            task.cancel()
            return task
        return None

    def _schedule_prefetch(self) -> None:
        if not self.prefetch_enabled:
            return
        self._prefetch_task = asyncio.create_task(self._prefetch(self._generation))

    async def _prefetch(self, generation: int) -> None:
        try:
            fact = await self.provider.fetch_by_category(self.selected_category)
        except Exception as e:
            logger.info("Pre-fetch failed: %s", e)
            return

        if generation != self._generation:
            return
        if fact == self.current_fact or fact in self._history.facts:
            logger.debug("Pre-fetched fact was already shown, dropping it")
            return
        self._next_fact = fact

    def _is_favorite(self, fact: Fact) -> bool:
        return any(favorite.text == fact.text for favorite in self.favorites)

    def _annotate_favorite(self, fact: Fact) -> Fact:
        is_favorite = self._is_favorite(fact)
        if fact.is_favorite == is_favorite:
            return fact
        return fact.with_favorite(is_favorite)

    def _save_favorites(self) -> None:
        if self.preferences is not None:
            self.preferences.save_favorites(self.favorites)

    def _replace_current(self, fact: Fact) -> None:
        self.current_fact = fact
        self._history.replace_current(fact)

    def toggle_favorite(self) -> None:
        if self.current_fact is None:
            return

        fact = self.current_fact.with_favorite(not self.current_fact.is_favorite)
        self._replace_current(fact)

        if fact.is_favorite:
            if not self._is_favorite(fact):
                self.favorites.append(fact)
        else:
            self.favorites = [f for f in self.favorites if f.text != fact.text]

        self._save_favorites()
        if self.event_log:
            self.event_log.log("favorite_toggled", fact=fact.text, is_favorite=fact.is_favorite)
        self._notify()

    def remove_favorite(self, index: int) -> Fact | None:
        """Remove ``favorites[index]``; unflags the current fact if it matches."""
        if not 0 <= index < len(self.favorites):
            return None

        removed = self.favorites.pop(index)
        if self.current_fact is not None and self.current_fact.text == removed.text:
            self.current_fact = self.current_fact.with_favorite(False)

        self._save_favorites()
        self._notify()
        return removed

    async def translate_current_fact(self, language: TranslationLanguage | str) -> None:
        fact = self.current_fact
        if fact is None:
            return
        language = TranslationLanguage(language)

        if fact.translation_language == language.value and fact.translated_text is not None:
            if self.event_log:
                self.event_log.log_translation(fact.text, language.value, cached=True)
            self._apply_translation(fact.translated_text, language)
            return

        self.is_translating = True
        self._notify()
        started = time.monotonic()
        try:
            translated = await self.translator.translate(fact.text, language)
        finally:
            self.is_translating = False

        fallback = translated == fallback_translation(fact.text, language)
        if self.event_log:
            self.event_log.log_translation(
                fact.text,
                language.value,
                fallback=fallback,
                duration_ms=(time.monotonic() - started) * 1000,
            )

        current = self.current_fact
        if current is None or current.text != fact.text:
            logger.debug("Displayed fact changed during translation, discarding result")
        elif fallback:
            self.error_message = self.TRANSLATION_FALLBACK_MESSAGE
        else:
            self._apply_translation(translated, language)
            return
        self._notify()

    def _apply_translation(self, translated: str, language: TranslationLanguage) -> None:
        assert self.current_fact is not None
        self._clear_translation_message()
        self._replace_current(self.current_fact.with_translation(translated, language))
        self._notify()

    def _clear_translation_message(self) -> None:
        if self.error_message == self.TRANSLATION_FALLBACK_MESSAGE:
            self.error_message = None

    def reset_translation(self) -> None:
        if self.current_fact is None:
            return
        self._clear_translation_message()
        self._replace_current(self.current_fact.without_translation())
        self._notify()

    def speak_current_fact(self) -> None:
        """Read the current fact (or its translation) aloud.

        Must be called from a running event loop; completion is watched by
        a background task.
        """
        fact = self.current_fact
        if fact is None:
            return

        language = self.current_translation_language
        locale = language.speech_locale if language else None

        self._cancel_speech_watch()
        self.speaker.speak(fact.translated_text or fact.text, locale)
        self.is_speaking = True
        self._speech_task = asyncio.create_task(self._watch_speech())
        if self.event_log:
            self.event_log.log("speech_started", fact=fact.text, language=locale)
        self._notify()

    async def _watch_speech(self) -> None:
        await self.speaker.wait_until_done()
        self.is_speaking = False
        self._speech_task = None
        self._notify()

    def _cancel_speech_watch(self) -> None:
        task, self._speech_task = self._speech_task, None
        if task is not None and not task.done():
            task.cancel()

    def stop_speaking(self) -> None:
        self.speaker.stop()
        self._cancel_speech_watch()
        was_speaking, self.is_speaking = self.is_speaking, False
        if was_speaking:
            if self.event_log:
                self.event_log.log("speech_stopped")
            self._notify()

    def change_background_color(self, color: str) -> None:
        if not is_hex_color(color):
            raise ValueError(f"Not a #RRGGBB color: {color!r}")
        self.background_color = color
        if self.preferences is not None:
            self.preferences.save_background_color(color)
        self._notify()

    def share_text(self) -> str | None:
        if self.current_fact is None:
            return None
        return self.SHARE_TEMPLATE.format(text=self.current_fact.text)

    def describe_navigation(self) -> str:
        return self._history.describe(self.current_fact)

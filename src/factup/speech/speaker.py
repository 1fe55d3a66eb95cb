"""Text-to-speech over pyttsx3."""

import asyncio
import logging
import threading
from typing import Any, Callable

import pyttsx3

logger = logging.getLogger(__name__)


def _normalize_locale(value: Any) -> str:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    text = "".join(ch for ch in str(value) if ch.isprintable())
    return text.strip().lower().replace("_", "-")


def select_voice(engine: Any, locale: str) -> str | None:
    """Return the id of the first voice matching ``locale``.

    An exact locale match (``es-es``) wins over a language match (``es``).
    """
    wanted = _normalize_locale(locale)
    language = wanted.split("-")[0]
    fallback: str | None = None

    for voice in engine.getProperty("voices") or []:
        languages = [_normalize_locale(lang) for lang in getattr(voice, "languages", None) or []]
        if wanted in languages:
            return voice.id
        if fallback is None and any(lang.split("-")[0] == language for lang in languages):
            fallback = voice.id

    return fallback


class Speaker:
    """Speaks one utterance at a time on a background thread.

    A fresh engine is created for every utterance; pyttsx3 engines do not
    survive being reused across threads on every driver.
    """

    def __init__(
        self,
        engine_factory: Callable[[], Any] | None = None,
        poll_interval: float = 0.5,
    ) -> None:
        self._engine_factory = engine_factory or pyttsx3.init
        self.poll_interval = poll_interval
        self._lock = threading.Lock()
        self._engine: Any = None
        self._thread: threading.Thread | None = None
        self._cancelled = threading.Event()

    def speak(self, text: str, locale: str | None = None) -> None:
        """Start speaking ``text``, stopping any utterance in flight."""
        self.stop()

        cancelled = threading.Event()
        self._cancelled = cancelled
        thread = threading.Thread(
            target=self._run,
            args=(text, locale, cancelled),
            name="factup-speech",
            daemon=True,
        )
        self._thread = thread
        thread.start()

    def _run(self, text: str, locale: str | None, cancelled: threading.Event) -> None:
        engine = None
        try:
            engine = self._engine_factory()
            with self._lock:
                if cancelled.is_set():
                    return
                self._engine = engine

            if locale:
                voice_id = select_voice(engine, locale)
                if voice_id is not None:
                    engine.setProperty("voice", voice_id)
                else:
                    logger.info("No voice for %s, using the default voice", locale)

            engine.say(text)
            engine.runAndWait()
        except Exception as e:
            # Nothing above this thread can handle it.
            logger.warning("Speech failed: %s", e)
        finally:
            with self._lock:
                if self._engine is engine:
                    self._engine = None

    def stop(self) -> None:
        """Stop the current utterance, if any.

        Does not wait for the worker thread; a worker whose driver ignores
        the stop request finishes in the background.
        """
        with self._lock:
            self._cancelled.set()
            engine = self._engine
            self._engine = None

        if engine is not None:
            try:
                engine.stop()
            except RuntimeError as e:
                logger.debug("Engine stop failed: %s", e)

        self._thread = None

    def is_active(self) -> bool:
        """Whether an utterance is still running."""
        thread = self._thread
        return thread is not None and thread.is_alive()

    async def wait_until_done(self) -> None:
        """Resolve once the current utterance has finished."""
        while self.is_active():
            await asyncio.sleep(self.poll_interval)

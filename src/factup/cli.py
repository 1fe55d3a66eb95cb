"""CLI interface for Fact Up."""

import asyncio
import uuid
from datetime import datetime

from .config import FactUpConfig, load_config
from .facts import CategoryNotFoundError, FactCategory, FactProvider, TranslationLanguage
from .logging import configure_logger, get_logger
from .notifications import NotificationSettings, confirmation_message, plan_notifications
from .session import FactSession
from .speech import Speaker
from .storage import PreferencesStore
from .translation import Translator

BANNER = """
╔══════════════════════════════════════════╗
║             💡 Fact Up v0.1.0            ║
║        Bite-sized trivia, one a tap      ║
╚══════════════════════════════════════════╝

Commands:
  <Enter>, /next        - Next fact
  /back                 - Previous fact
  /fav                  - Toggle favorite on the current fact
  /favorites            - List favorites
  /unfav <n>            - Remove favorite number n
  /category <name>      - Switch category ({categories})
  /translate <lang>     - Translate ({languages})
  /original             - Show the untranslated fact
  /speak, /stop         - Read the fact aloud / stop reading
  /share                - Print a shareable version of the fact
  /color <#RRGGBB>      - Set the background color preference
  /notify [on F S E|off] - Show or set daily reminders
  /clear                - Clear navigation history
  /debug                - Show the navigation state
  /help                 - Show this help
  /exit, /quit          - Exit
"""


def _banner() -> str:
    return BANNER.format(
        categories=", ".join(c.value for c in FactCategory),
        languages=", ".join(lang.value for lang in TranslationLanguage),
    )


class CLI:
    """Interactive command-line front-end over a FactSession."""

    def __init__(
        self,
        config: FactUpConfig | None = None,
        session: FactSession | None = None,
        preferences: PreferencesStore | None = None,
    ) -> None:
        self.config = config or load_config()
        self.preferences = preferences or PreferencesStore(self.config.preferences_path)
        self.logger = get_logger()

        if session is None:
            session = FactSession(
                provider=FactProvider.create(
                    self.config.ninja_api_key, timeout=self.config.request_timeout
                ),
                translator=Translator(timeout=self.config.request_timeout),
                speaker=Speaker(poll_interval=self.config.speech_poll_interval),
                preferences=self.preferences,
                event_log=self.logger,
                category=FactCategory(self.config.default_category),
                prefetch=self.config.prefetch,
            )
        self.session = session
        self.session_id = self._new_session_id()

    def _new_session_id(self) -> str:
        """Generate a new session ID."""
        return f"cli-{uuid.uuid4().hex[:8]}"

    def _format_fact(self) -> str:
        """Format the current fact for display."""
        session = self.session
        output = ["\n" + "─" * 40]

        if session.error_message:
            output.append(f"⚠ {session.error_message}")

        fact = session.current_fact
        if fact is None:
            output.append("No fact to show.")
        else:
            star = "★" if fact.is_favorite else "☆"
            output.append(f"[{fact.category}] {star}")
            output.append(fact.text)
            if fact.translated_text:
                language = session.current_translation_language
                label = language.display_name if language else fact.translation_language
                output.append(f"\n({label}) {fact.translated_text}")

        output.append("─" * 40)
        if session.history_cursor >= 0:
            output.append(f"History {session.history_cursor + 1}/{len(session.history)}")
        return "\n".join(output)

    def _format_favorites(self) -> str:
        if not self.session.favorites:
            return "No favorites yet."
        return "\n".join(
            f"{i}. {fact.text}" for i, fact in enumerate(self.session.favorites, 1)
        )

    def _handle_notify(self, args: list[str]) -> str:
        settings = self.preferences.load_notification_settings()

        if args and args[0] == "off":
            settings = self.preferences.save_notification_settings(
                NotificationSettings(
                    enabled=False,
                    frequency=settings.frequency,
                    start_hour=settings.start_hour,
                    end_hour=settings.end_hour,
                )
            )
            return "Reminders disabled."

        if args and args[0] == "on":
            try:
                values = [int(v) for v in args[1:4]]
            except ValueError:
                return "Usage: /notify on <per-day> <start-hour> <end-hour>"
            frequency, start_hour, end_hour = (
                values + [settings.frequency, settings.start_hour, settings.end_hour][len(values):]
            )
            settings = self.preferences.save_notification_settings(
                NotificationSettings(True, frequency, start_hour, end_hour)
            )
            return confirmation_message(settings)

        if not settings.enabled:
            return "Reminders are off. Use /notify on <per-day> <start-hour> <end-hour>."

        upcoming = plan_notifications(settings, datetime.now(), days=1)
        lines = [confirmation_message(settings)]
        lines.extend(f"  {n.fire_at:%H:%M}  {n.body[:60]}" for n in upcoming)
        return "\n".join(lines)

    async def _handle_command(self, command: str) -> bool:
        """Handle a command. Returns True if should continue, False to exit."""
        parts = command.strip().split()
        cmd = parts[0].lower() if parts else "/next"
        args = parts[1:]
        session = self.session

        if cmd in ("/exit", "/quit", "exit", "quit"):
            print("\n👋 Goodbye!")
            self.logger.log("session_end", session_id=self.session_id)
            return False

        if cmd == "/help":
            print(_banner())
        elif cmd == "/next":
            await session.advance()
            print(self._format_fact())
        elif cmd == "/back":
            if session.retreat():
                print(self._format_fact())
            else:
                print("Nothing further back.")
        elif cmd == "/fav":
            session.toggle_favorite()
            print(self._format_fact())
        elif cmd == "/favorites":
            print(self._format_favorites())
        elif cmd == "/unfav":
            try:
                removed = session.remove_favorite(int(args[0]) - 1)
            except (IndexError, ValueError):
                removed = None
            print(f"Removed: {removed.text}" if removed else "No such favorite.")
        elif cmd == "/category":
            try:
                await session.change_category(" ".join(args))
            except CategoryNotFoundError as e:
                print(f"❌ {e}")
            else:
                print(self._format_fact())
        elif cmd == "/translate":
            try:
                language = TranslationLanguage(args[0].lower())
            except (IndexError, ValueError):
                print("Usage: /translate <" + "|".join(lang.value for lang in TranslationLanguage) + ">")
            else:
                print("Translating...")
                await session.translate_current_fact(language)
                print(self._format_fact())
        elif cmd == "/original":
            session.reset_translation()
            print(self._format_fact())
        elif cmd == "/speak":
            session.speak_current_fact()
        elif cmd == "/stop":
            session.stop_speaking()
        elif cmd == "/share":
            print(session.share_text() or "No fact to share.")
        elif cmd == "/color":
            try:
                session.change_background_color(args[0])
            except (IndexError, ValueError):
                print("Usage: /color #RRGGBB")
            else:
                print(f"Background color set to {session.background_color}")
        elif cmd == "/notify":
            print(self._handle_notify(args))
        elif cmd == "/clear":
            session.clear_history()
            print("History cleared.")
        elif cmd == "/debug":
            print(session.describe_navigation())
        else:
            print(f"Unknown command: {cmd}. Type /help.")

        return True

    async def run(self) -> None:
        """Run the interactive CLI."""
        print(_banner())
        self.logger.set_session_id(self.session_id)
        self.logger.log("session_start", session_id=self.session_id)

        await self.session.start()
        print(self._format_fact())

        try:
            while True:
                try:
                    user_input = await asyncio.to_thread(input, "fact> ")
                    if not await self._handle_command(user_input):
                        break
                except KeyboardInterrupt:
                    print("\n👋 Goodbye!")
                    self.logger.log("session_interrupt", session_id=self.session_id)
                    break
                except EOFError:
                    print("\n👋 Goodbye!")
                    break
        finally:
            await self.session.aclose()
            await self.session.provider.aclose()
            await self.session.translator.aclose()


async def run_cli() -> None:
    """Run the CLI with configuration from disk and environment."""
    config = load_config()
    configure_logger(config.log_dir)

    if not config.ninja_api_key:
        print("⚠ FACTUP_NINJA_API_KEY is not set; Random/Interesting/Surprising facts")
        print("  will come from the generic source only.")

    cli = CLI(config=config)
    await cli.run()

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from html import unescape

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.constants import ParseMode
from telegram.error import BadRequest, NetworkError, TelegramError
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
)

from .cache import CacheUnavailableError, TournamentCache
from .categories import (
    CATEGORY_DISPLAY_ORDER,
    EventCategory,
    category_counts,
    category_label,
    parse_category,
)
from .config import Settings
from .filtering import (
    filter_tournaments,
    group_by_day,
    month_grid,
    toggle_category,
    toggle_other_stores,
    toggle_store,
    tournaments_on,
)
from .formatters import (
    format_calendar,
    format_category_filter,
    format_day,
    format_store_filter,
    format_week_list,
)
from .konami import KonamiClient, TournamentApiError
from .labels import SUPPORTED_LANGUAGES, label
from .models import Tournament
from .preferences import VIEW_MODES, AppState, JsonFileStore
from .stores import summarize_stores
from .weeks import group_by_week

TOURNAMENTS_KEY = "tournaments"
CACHE_MTIME_KEY = "tournaments_mtime"
SELECTED_STORES_KEY = "selected_stores"
SELECTED_CATEGORIES_KEY = "selected_categories"
STORE_BUTTONS_KEY = "store_buttons"
LOGGER = logging.getLogger(__name__)
MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


class TournaCalBot:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.konami = KonamiClient(
            search_url=settings.konami_search_url,
            nation_codes=settings.konami_nation_codes,
            index_count=settings.konami_index_count,
            timeout_seconds=settings.konami_timeout_seconds,
        )
        self.cache = TournamentCache(settings.tournaments_cache_path)
        self.preferences = JsonFileStore(settings.preferences_path)
        self.app = Application.builder().token(settings.telegram_bot_token).build()
        self._register_handlers()

    def _register_handlers(self) -> None:
        self.app.add_handler(CommandHandler("start", self.start))
        self.app.add_handler(CommandHandler("help", self.help_cmd))
        self.app.add_handler(CommandHandler("list", self.list_cmd))
        self.app.add_handler(CommandHandler("calendar", self.calendar_cmd))
        self.app.add_handler(CommandHandler("day", self.day_cmd))
        self.app.add_handler(CommandHandler("stores", self.stores_cmd))
        self.app.add_handler(CommandHandler("categories", self.categories_cmd))
        self.app.add_handler(CommandHandler("clear", self.clear_cmd))
        self.app.add_handler(CommandHandler("view", self.view_cmd))
        self.app.add_handler(CommandHandler("lang", self.lang_cmd))
        self.app.add_handler(CommandHandler("refresh", self.refresh_cmd))
        self.app.add_handler(CallbackQueryHandler(self.on_store_selected, pattern=r"^(store:|other$)"))
        self.app.add_handler(CallbackQueryHandler(self.on_category_selected, pattern=r"^cat:"))
        self.app.add_error_handler(self.on_error)

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return
        await msg.reply_text(
            "Yu-Gi-Oh! tournaments, week by week.\n\n"
            "/list - tournaments grouped by week\n"
            "/calendar 2026-01 - month calendar\n"
            "/day 2026-01-17 - tournaments on one day\n"
            "/stores, /categories - pick filters\n"
            "/view list|calendar, /lang hu|en",
        )
        await self._send_current_view(update, context)

    async def help_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.message.reply_text(
            "How to use:\n"
            "- /list shows upcoming tournaments by ISO week\n"
            "- /calendar [YYYY-MM] shows a month with tournament counts\n"
            "- /day YYYY-MM-DD lists one day\n"
            "- /stores and /categories toggle filters, /clear resets them\n"
            "- /view switches the default view, /lang switches language\n"
            "- /refresh reloads data from Konami",
        )

    async def list_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return
        state = self._state(update)
        tournaments = await self._filtered_tournaments(context)
        text = format_week_list(group_by_week(tournaments), state.language)
        await self._safe_send_message(context=context, chat_id=msg.chat_id, text=text, parse_mode=ParseMode.HTML)

    async def calendar_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return
        today = date.today()
        year, month = today.year, today.month
        if context.args:
            m = MONTH_RE.match(context.args[0].strip())
            if not m or not 1 <= int(m.group(2)) <= 12:
                await msg.reply_text("Invalid month. Example: /calendar 2026-01")
                return
            year, month = int(m.group(1)), int(m.group(2))

        state = self._state(update)
        tournaments = await self._filtered_tournaments(context)
        cells = month_grid(year, month, group_by_day(tournaments), today=today)
        text = format_calendar(year, month, cells, state.language)
        await self._safe_send_message(context=context, chat_id=msg.chat_id, text=text, parse_mode=ParseMode.HTML)

    async def day_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return
        day = date.today()
        if context.args:
            try:
                day = datetime.strptime(context.args[0].strip(), "%Y-%m-%d").date()
            except ValueError:
                await msg.reply_text("Invalid date. Example: /day 2026-01-17")
                return

        state = self._state(update)
        tournaments = await self._filtered_tournaments(context)
        rows = tournaments_on(group_by_day(tournaments), day)
        await self._safe_send_message(
            context=context,
            chat_id=msg.chat_id,
            text=format_day(day, rows, state.language),
            parse_mode=ParseMode.HTML,
        )

    async def stores_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return
        text, markup = await self._store_filter_view(update, context)
        await msg.reply_text(text, parse_mode=ParseMode.HTML, reply_markup=markup)

    async def categories_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return
        if context.args:
            category = parse_category(" ".join(context.args))
            if category is None:
                await msg.reply_text("Unknown event type. Example: /categories regional")
                return
            selected = context.chat_data.get(SELECTED_CATEGORIES_KEY, frozenset())
            context.chat_data[SELECTED_CATEGORIES_KEY] = toggle_category(selected, category)
        text, markup = await self._category_filter_view(update, context)
        await msg.reply_text(text, parse_mode=ParseMode.HTML, reply_markup=markup)

    async def clear_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        context.chat_data[SELECTED_STORES_KEY] = frozenset()
        context.chat_data[SELECTED_CATEGORIES_KEY] = frozenset()
        await update.message.reply_text("Filters cleared.")

    async def view_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return
        state = self._state(update)
        if context.args:
            mode = context.args[0].strip().lower()
            if mode not in VIEW_MODES:
                await msg.reply_text("Usage: /view list|calendar")
                return
            state.view_mode = mode
        else:
            state.toggle_view_mode()
        await msg.reply_text(f"Default view: {state.view_mode}")
        await self._send_current_view(update, context)

    async def lang_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return
        state = self._state(update)
        if not context.args or context.args[0].strip().lower() not in SUPPORTED_LANGUAGES:
            await msg.reply_text(f"Usage: /lang {'|'.join(SUPPORTED_LANGUAGES)} (current: {state.language})")
            return
        state.language = context.args[0].strip().lower()
        await msg.reply_text(f"Language: {state.language}")

    async def refresh_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return
        await msg.reply_text("Fetching tournaments from Konami. Please wait...")
        try:
            tournaments = await self._fetch_and_cache()
        except TournamentApiError as exc:
            LOGGER.error("Refresh failed: %s", exc)
            await msg.reply_text("Could not reach the Konami tournament search. Try again later.")
            return
        self._remember(context, tournaments)
        await msg.reply_text(f"Loaded {len(tournaments)} tournaments.")

    async def on_store_selected(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        if query is None or query.data is None:
            return
        await query.answer()

        tournaments = await self._tournaments(context)
        selected = context.chat_data.get(SELECTED_STORES_KEY, frozenset())
        if query.data == "other":
            selected = toggle_other_stores(tournaments, selected, top_n=self.settings.store_top_count)
        else:
            buttons: list[str] = context.chat_data.get(STORE_BUTTONS_KEY, [])
            try:
                name = buttons[int(query.data.split(":", 1)[1])]
            except (IndexError, ValueError):
                await query.edit_message_text("That store list is out of date. Run /stores again.")
                return
            selected = toggle_store(selected, name)
        context.chat_data[SELECTED_STORES_KEY] = selected

        text, markup = await self._store_filter_view(update, context)
        await query.edit_message_text(text, parse_mode=ParseMode.HTML, reply_markup=markup)

    async def on_category_selected(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        if query is None or query.data is None:
            return
        await query.answer()

        try:
            category = EventCategory(query.data.split(":", 1)[1])
        except ValueError:
            return
        selected = context.chat_data.get(SELECTED_CATEGORIES_KEY, frozenset())
        context.chat_data[SELECTED_CATEGORIES_KEY] = toggle_category(selected, category)

        text, markup = await self._category_filter_view(update, context)
        await query.edit_message_text(text, parse_mode=ParseMode.HTML, reply_markup=markup)

    async def _store_filter_view(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> tuple[str, InlineKeyboardMarkup | None]:
        state = self._state(update)
        tournaments = await self._tournaments(context)
        selected = context.chat_data.get(SELECTED_STORES_KEY, frozenset())
        overview = summarize_stores(tournaments, top_n=self.settings.store_top_count)

        names = [store.name for store in overview.main]
        context.chat_data[STORE_BUTTONS_KEY] = names
        keyboard = [
            [InlineKeyboardButton(text=f"{store.name[:40]} ({store.count})", callback_data=f"store:{idx}")]
            for idx, store in enumerate(overview.main)
        ]
        if overview.other:
            keyboard.append(
                [
                    InlineKeyboardButton(
                        text=f"{label('other_stores', state.language)} ({overview.other_count})",
                        callback_data="other",
                    )
                ]
            )
        markup = InlineKeyboardMarkup(keyboard) if keyboard else None
        return format_store_filter(overview, selected, state.language), markup

    async def _category_filter_view(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> tuple[str, InlineKeyboardMarkup]:
        state = self._state(update)
        tournaments = await self._tournaments(context)
        selected = context.chat_data.get(SELECTED_CATEGORIES_KEY, frozenset())
        counts = category_counts(tournaments)
        keyboard = [
            [
                InlineKeyboardButton(
                    text=f"{category_label(category, state.language)} ({counts[category]})",
                    callback_data=f"cat:{category.value}",
                )
            ]
            for category in CATEGORY_DISPLAY_ORDER
            if counts[category] or category in selected
        ]
        return format_category_filter(counts, selected, state.language), InlineKeyboardMarkup(keyboard)

    async def _send_current_view(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        context.args = []
        if self._state(update).view_mode == "calendar":
            await self.calendar_cmd(update, context)
        else:
            await self.list_cmd(update, context)

    def _state(self, update: Update) -> AppState:
        chat = update.effective_chat
        user = update.effective_user
        return AppState(
            self.preferences,
            namespace=str(chat.id) if chat else "",
            language_hint=user.language_code if user else None,
            default_language=self.settings.default_language,
        )

    async def _filtered_tournaments(self, context: ContextTypes.DEFAULT_TYPE) -> list[Tournament]:
        tournaments = await self._tournaments(context)
        return filter_tournaments(
            tournaments,
            context.chat_data.get(SELECTED_STORES_KEY, frozenset()),
            context.chat_data.get(SELECTED_CATEGORIES_KEY, frozenset()),
        )

    async def _tournaments(self, context: ContextTypes.DEFAULT_TYPE) -> list[Tournament]:
        """Tournaments from ``bot_data``, reloaded whenever the cache file is newer."""
        cached: list[Tournament] | None = context.bot_data.get(TOURNAMENTS_KEY)
        modified = self.cache.last_modified()
        loaded_from = context.bot_data.get(CACHE_MTIME_KEY)
        if cached is not None and (modified is None or (loaded_from is not None and modified <= loaded_from)):
            return cached
        try:
            tournaments = self.cache.load()
            LOGGER.info("Loaded %d tournaments from cache (updated %s)", len(tournaments), modified)
        except CacheUnavailableError as exc:
            if cached is not None:
                LOGGER.warning("Cache became unreadable (%s), keeping %d loaded tournaments", exc, len(cached))
                return cached
            LOGGER.info("No usable cache (%s), fetching live", exc)
            try:
                tournaments = await self._fetch_and_cache()
            except TournamentApiError as api_exc:
                LOGGER.error("Live fetch failed: %s", api_exc)
                return []
        self._remember(context, tournaments)
        return tournaments

    def _remember(self, context: ContextTypes.DEFAULT_TYPE, tournaments: list[Tournament]) -> None:
        context.bot_data[TOURNAMENTS_KEY] = tournaments
        context.bot_data[CACHE_MTIME_KEY] = self.cache.last_modified()

    async def _fetch_and_cache(self) -> list[Tournament]:
        payload = await self.konami.fetch_payload()
        self.cache.save(payload)
        return self.cache.load()

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        LOGGER.exception("Unhandled Telegram update error: %s", context.error)
        if isinstance(context.error, BadRequest):
            LOGGER.error("Telegram BadRequest details: %s", context.error)

    async def _safe_send_message(
        self,
        *,
        context: ContextTypes.DEFAULT_TYPE,
        chat_id: int,
        text: str,
        parse_mode: str | None = None,
    ) -> None:
        chunks = split_message(text, limit=3500)
        for chunk in chunks:
            try:
                await context.bot.send_message(chat_id=chat_id, text=chunk, parse_mode=parse_mode)
            except BadRequest as exc:
                LOGGER.warning("HTML send failed, retrying plain text. Reason: %s", exc)
                plain = strip_html(chunk)
                for plain_chunk in split_message(plain, limit=3900):
                    await context.bot.send_message(chat_id=chat_id, text=plain_chunk)

    def run(self) -> None:
        LOGGER.info("Starting tournament calendar polling loop...")
        try:
            self.app.run_polling()
        except NetworkError as exc:
            LOGGER.error(
                "Could not reach Telegram API. Check internet/DNS/proxy/firewall. Details: %s",
                exc,
            )
            raise
        except TelegramError as exc:
            LOGGER.error("Telegram API error while starting bot: %s", exc)
            raise


def split_message(text: str, limit: int = 3500) -> list[str]:
    if len(text) <= limit:
        return [text]
    out: list[str] = []
    remaining = text
    while len(remaining) > limit:
        cut = remaining.rfind("\n", 0, limit)
        if cut < limit // 2:
            cut = limit
        out.append(remaining[:cut].strip())
        remaining = remaining[cut:].strip()
    if remaining:
        out.append(remaining)
    return out


def strip_html(text: str) -> str:
    text = re.sub(r"</?(?:b|i|u|strong|em|code|pre)>", "", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    return unescape(text)

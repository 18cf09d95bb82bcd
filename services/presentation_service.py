"""
services/presentation_service.py
---------------------------------
Turns a Screen into message text plus an inline keyboard.

Everything here is a pure function of its arguments: no I/O, no state,
and missing optional data only drops a line instead of raising.
"""

from dataclasses import dataclass
from html import escape
from typing import Optional

from models.consultation import ConsultationRequest, ConsultationStage
from models.events import CallbackAction, CallbackKind
from models.guide import GuideRecord
from models.screen import (
    ButtonLayout,
    CallbackButton,
    LinkButton,
    RenderedScreen,
    Screen,
    ScreenKind,
)


@dataclass(frozen=True)
class PresentationContext:
    """
    Data a screen may need besides the Screen value itself.

    Attributes:
        channel_url: Public link to the gated channel, None for private channels.
        guides: Catalog snapshot, used by GUIDE_LIST.
        guide: Resolved guide for GUIDE_DETAIL / GIFT_UNLOCKED.
        payload_slug: Deep-link payload that did not resolve to a guide.
    """
    channel_url: Optional[str] = None
    guides: tuple[GuideRecord, ...] = ()
    guide: Optional[GuideRecord] = None
    payload_slug: Optional[str] = None


# ── Buttons ───────────────────────────────────────────────

BACK_TO_MENU_BUTTON = CallbackButton("⬅️ Вернуться в меню", CallbackKind.SHOW_MAIN_MENU.value)
PRICE_BUTTON = CallbackButton("📈 Цены", CallbackKind.PRICE.value)
GIFT_BUTTON = CallbackButton("Получить подарок 🎁", CallbackKind.GET_GIFT.value)
PICK_GIFT_BUTTON = CallbackButton("Выбрать подарок 🎁", CallbackKind.GET_GIFT.value)
ABOUT_BUTTON = CallbackButton("Обо мне", CallbackKind.ABOUT.value)
BOOKING_INFO_BUTTON = CallbackButton("Запись на консультацию", CallbackKind.BOOKING_INFO.value)
PRICE_BOOKING_BUTTON = CallbackButton("Записаться на консультацию", CallbackKind.BOOKING_INFO.value)
BOOK_BUTTON = CallbackButton("Записаться", CallbackKind.BOOK.value)

_BACK_ROW = ((BACK_TO_MENU_BUTTON,),)

# ── Texts ─────────────────────────────────────────────────

MAIN_MENU_TEXT = "\n".join([
    "📋 Главное меню",
    "",
    "Привет! 🥦 Я дипломированный нутрициолог. Этот бот поможет ответить "
    "тебе на самые популярные вопросы.",
    "",
    "Доступные команды:",
    "/price — Цены и форматы работы",
    "/guides — Получить подарок 🎁",
    "/about_me — Обо мне",
    "",
    "Выбирай нужную кнопку ниже:",
])

STALE_GIFT_LINK_TEXT = (
    "⚠️ Подарок по этой ссылке больше недоступен, но ты можешь выбрать "
    "другой из списка 👇"
)

_CONSULTATION_SCOPE = "\n".join([
    "Что входит:",
    "- индивидуальный разбор твоего текущего питания;",
    "- рекомендации по улучшению питания;",
    "- интерпретация имеющихся анализов;",
    "- при необходимости подберу для тебя БАДы;",
    "- составлю индивидуальный примерный рацион питания;",
    "- составлю план действий для улучшения имеющихся проблем и симптомов.",
])

PRICE_TEXT = "\n".join([
    "💬 Форматы работы:",
    "",
    "1️⃣ Консультация до 1 часа + рекомендации на месяц",
    "",
    _CONSULTATION_SCOPE,
    "💵 Стоимость: 3000 руб.",
    "🎁 в подарок ты получишь конструктор здоровой тарелки питания!",
    "",
    "2️⃣ Сопровождение на 1 месяц",
    "",
    _CONSULTATION_SCOPE,
    "- еженедельная обратная связь по итогам пройденной недели, корректировки "
    "и мотивация, возможность задавать вопросы.",
    "💵 Стоимость: 7000 руб.",
    "🎁 в подарок ты получишь конструктор здоровой тарелки питания!",
    "",
    "🔥 При записи на консультацию в течение сегодняшнего дня сделаю скидку 1000 руб.",
    "",
    "Буду рада помочь решить тебе свою давнюю проблему! 😇 Я за осознанный "
    "подход к питанию, без диет и без крайностей.",
])

ABOUT_TEXT = "\n".join([
    "👋 Обо мне",
    "",
    "Я дипломированный нутрициолог. Помогаю наладить питание без диет и "
    "запретов: разбираю рацион и анализы, подбираю БАДы и составляю понятный "
    "план действий.",
    "",
    "В моём телеграм канале — полезные гайды, разборы и ответы на вопросы.",
])

BOOKING_INFO_TEXT = "\n".join([
    "📝 Запись на консультацию",
    "",
    "На консультации мы разберём твоё питание и анализы и составим план действий.",
    "Нажми «Записаться», и я напишу тебе в личные сообщения, чтобы договориться о времени.",
])

BOOKING_CONFIRMED_TEXT = "\n".join([
    "✅ Заявка на консультацию принята!",
    "",
    "Я свяжусь с тобой в ближайшее время в личных сообщениях.",
    "Проверь, пожалуйста, что у тебя открыты входящие сообщения.",
])

EMPTY_GUIDES_TEXT = "Пока нет доступных гайдов."


# ── Layouts ───────────────────────────────────────────────

def _main_menu_layout(payload_slug: Optional[str] = None) -> ButtonLayout:
    if payload_slug:
        return (
            (PICK_GIFT_BUTTON,),
            (PRICE_BUTTON,),
            (ABOUT_BUTTON,),
            (BOOKING_INFO_BUTTON,),
        )
    return (
        (PRICE_BUTTON,),
        (GIFT_BUTTON,),
        (ABOUT_BUTTON,),
        (BOOKING_INFO_BUTTON,),
    )


def _gate_row(slug: str, channel_url: Optional[str]) -> tuple:
    """Subscribe link (when the channel is public) next to the verify button."""
    verify = CallbackButton("Проверить подписку", CallbackAction.download(slug).encode())
    if channel_url:
        return (LinkButton("Подписаться", channel_url), verify)
    return (verify,)


def _format_guide_item(guide: GuideRecord) -> str:
    description = f" — {escape(guide.description)}" if guide.description else ""
    return f"• {escape(guide.display_title)}{description}"


# ── Screens ───────────────────────────────────────────────

def _main_menu(screen: Screen, ctx: PresentationContext) -> RenderedScreen:
    text = MAIN_MENU_TEXT
    if ctx.payload_slug:
        text = f"{STALE_GIFT_LINK_TEXT}\n\n{text}"
    return RenderedScreen(text, _main_menu_layout(ctx.payload_slug))


def _price(screen: Screen, ctx: PresentationContext) -> RenderedScreen:
    return RenderedScreen(
        PRICE_TEXT,
        ((PRICE_BOOKING_BUTTON,), (BACK_TO_MENU_BUTTON,)),
    )


def _about(screen: Screen, ctx: PresentationContext) -> RenderedScreen:
    return RenderedScreen(ABOUT_TEXT, ((BOOKING_INFO_BUTTON,), (BACK_TO_MENU_BUTTON,)))


def _guide_list(screen: Screen, ctx: PresentationContext) -> RenderedScreen:
    if not ctx.guides:
        return RenderedScreen(EMPTY_GUIDES_TEXT, _BACK_ROW)

    lines = ["Список бесплатных гайдов:", ""]
    lines.extend(_format_guide_item(g) for g in ctx.guides)
    rows = tuple(
        (CallbackButton(g.display_title, CallbackAction.open(g.slug).encode()),)
        for g in ctx.guides
    )
    return RenderedScreen("\n".join(lines), rows + _BACK_ROW)


def _guide_detail(screen: Screen, ctx: PresentationContext) -> RenderedScreen:
    guide = ctx.guide
    channel = f": {escape(ctx.channel_url)}" if ctx.channel_url else ""

    if guide is None:
        lines = ["Я подготовила для тебя подарок 🎁"]
    else:
        lines = [
            "Привет! 😇 Я подготовила для тебя подарок 🎁 : "
            f"Гайд: <b>{escape(guide.display_title)}</b>",
        ]
        if guide.description:
            lines.append(escape(guide.description))
    lines += [
        "",
        f"Для того, чтобы получить его, подпишись на мой телеграм канал{channel}",
        "и нажми «Проверить подписку».",
    ]

    slug = screen.slug or (guide.slug if guide else None)
    rows: ButtonLayout = _BACK_ROW
    if slug:
        rows = (_gate_row(slug, ctx.channel_url),) + _BACK_ROW
    return RenderedScreen("\n".join(lines), rows)


def _booking_info(screen: Screen, ctx: PresentationContext) -> RenderedScreen:
    return RenderedScreen(BOOKING_INFO_TEXT, ((BOOK_BUTTON,), (BACK_TO_MENU_BUTTON,)))


def _booking_confirmed(screen: Screen, ctx: PresentationContext) -> RenderedScreen:
    return RenderedScreen(BOOKING_CONFIRMED_TEXT, _BACK_ROW)


def _gift_unlocked(screen: Screen, ctx: PresentationContext) -> RenderedScreen:
    gift = f"«{escape(ctx.guide.display_title)}» " if ctx.guide else ""
    text = "\n".join([
        "Спасибо за подписку!",
        f"Твой подарок {gift}уже в чате 🎁",
        "Надеюсь гайд и мой телеграм канал будут тебе полезны 😊",
    ])
    return RenderedScreen(text, _main_menu_layout())


_BUILDERS = {
    ScreenKind.MAIN_MENU: _main_menu,
    ScreenKind.PRICE: _price,
    ScreenKind.ABOUT: _about,
    ScreenKind.GUIDE_LIST: _guide_list,
    ScreenKind.GUIDE_DETAIL: _guide_detail,
    ScreenKind.BOOKING_INFO: _booking_info,
    ScreenKind.BOOKING_CONFIRMED: _booking_confirmed,
    ScreenKind.GIFT_UNLOCKED: _gift_unlocked,
}


def build_screen(screen: Screen, ctx: Optional[PresentationContext] = None) -> RenderedScreen:
    """
    Render a Screen.

    Args:
        screen: The screen to show.
        ctx: Catalog snapshot, resolved guide and channel link.

    Returns:
        The text (HTML) and the button layout.
    """
    return _BUILDERS[screen.kind](screen, ctx or PresentationContext())


def build_subscribe_prompt(guide: GuideRecord, channel_url: Optional[str]) -> RenderedScreen:
    """Reply for a user who pressed "check subscription" without being subscribed."""
    text = "\n".join([
        "Похоже, вы не подписаны на наш канал.",
        "Подпишитесь и снова нажмите кнопку:",
        channel_url or "Откройте канал в Telegram",
    ])
    return RenderedScreen(text, (_gate_row(guide.slug, channel_url),), parse_mode=None)


def build_admin_notification(request: ConsultationRequest) -> RenderedScreen:
    """Message sent to the administrator about a consultation request."""
    if request.stage is ConsultationStage.CONFIRMED:
        header = "📝 <b>Новая заявка на консультацию</b>"
    else:
        header = "👀 <b>Интерес к консультации</b> (открыл информацию о записи)"

    text = "\n".join([
        header,
        "",
        f"Имя: {escape(request.display_name)}",
        f"Username: {escape(request.handle) if request.handle else '—'}",
        f"ID: <code>{request.user_id}</code>",
        f'<a href="tg://user?id={request.user_id}">Написать пользователю</a>',
    ])
    return RenderedScreen(text)

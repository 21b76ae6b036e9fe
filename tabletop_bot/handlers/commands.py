"""
Обработчики команд трекера и бросков кубиков.
"""

from typing import Optional, Tuple

from aiogram import Router, html
from aiogram.filters import Command, CommandObject
from aiogram.types import Message, BotCommand

from ..services.blob_store import BlobStore
from ..services.logger import get_logger
from ..services.tracker_handler import make_tracker_handler

logger = get_logger('commands')
router = Router()

MAX_DICE = 5
MAX_TIMER_START = 65535

COMMANDS = [
    BotCommand(command="help", description="display this text"),
    BotCommand(command="t", description="show timers"),
    BotCommand(command="ta", description="<name> <start value> - add timer"),
    BotCommand(command="p", description="show players"),
    BotCommand(command="pa", description="<name> - add player"),
    BotCommand(command="reset", description="clear everything"),
    BotCommand(command="r1", description="roll 1 die"),
    BotCommand(command="r2", description="roll 2 dice"),
    BotCommand(command="r3", description="roll 3 dice"),
    BotCommand(command="roll", description="[n] - roll n dice"),
]

TIMER_USAGE_TEXT = f"Usage: /ta &lt;name&gt; &lt;start value&gt;, start value is 1..{MAX_TIMER_START}"
PLAYER_USAGE_TEXT = "Usage: /pa &lt;name&gt;"
ROLL_USAGE_TEXT = f"I could do only {MAX_DICE} dice at max, wanna try again?"


def actor_name(message: Message) -> str:
    """Имя пользователя для текста подтверждения."""
    if message.from_user:
        return html.bold(html.quote(message.from_user.full_name))
    return html.bold("Someone")


def parse_timer_args(args: Optional[str]) -> Tuple[str, int]:
    """
    Разбирает аргументы /ta: имя (может содержать пробелы) и начальное значение.

    Raises:
        ValueError: аргументы не заданы или значение не в диапазоне 1..65535
    """
    if not args or not args.strip():
        raise ValueError("missing arguments")
    parts = args.strip().rsplit(maxsplit=1)
    if len(parts) != 2:
        raise ValueError("missing start value")

    name, raw_value = parts
    if not (raw_value.isascii() and raw_value.isdigit()):
        raise ValueError(f"invalid start value: {raw_value}")
    value = int(raw_value)
    if value < 1 or value > MAX_TIMER_START:
        raise ValueError(f"start value out of range: {value}")
    return name, value


def parse_dice_count(args: Optional[str]) -> int:
    """Количество кубиков для /roll: по умолчанию 1, не больше MAX_DICE."""
    if not args or not args.strip():
        return 1
    raw = args.strip()
    if not (raw.isascii() and raw.isdigit()):
        raise ValueError(f"invalid dice count: {raw}")
    count = int(raw)
    if count < 1 or count > MAX_DICE:
        raise ValueError(f"dice count out of range: {count}")
    return count


def help_text() -> str:
    lines = ["These commands are supported:"]
    for command in COMMANDS:
        lines.append(f"/{command.command} - {html.quote(command.description)}")
    return "\n".join(lines)


@router.message(Command("help", "start"))
async def cmd_help(message: Message):
    """Обработчик команды /help."""
    await message.answer(help_text())


@router.message(Command("reset"))
async def cmd_reset(message: Message, command: CommandObject, blob_store: BlobStore):
    """Обработчик команды /reset [yes]."""
    handler = make_tracker_handler(message.bot, blob_store, message.chat.id)
    text = await handler.handle_reset(actor_name(message), command.args or '')
    await message.answer(text)


@router.message(Command("t"))
async def cmd_list_timers(message: Message, blob_store: BlobStore):
    """Обработчик команды /t - список таймеров."""
    handler = make_tracker_handler(message.bot, blob_store, message.chat.id)
    await handler.handle_list_timers()


@router.message(Command("ta"))
async def cmd_add_timer(message: Message, command: CommandObject, blob_store: BlobStore):
    """Обработчик команды /ta <name> <start value>."""
    try:
        name, start_value = parse_timer_args(command.args)
    except ValueError as e:
        logger.info(f"Неверные аргументы /ta в чате {message.chat.id}: {e}")
        await message.answer(TIMER_USAGE_TEXT)
        return

    handler = make_tracker_handler(message.bot, blob_store, message.chat.id)
    text = await handler.handle_create_timer(actor_name(message), name, start_value)
    await message.answer(text)


@router.message(Command("p"))
async def cmd_list_players(message: Message, blob_store: BlobStore):
    """Обработчик команды /p - список игроков."""
    handler = make_tracker_handler(message.bot, blob_store, message.chat.id)
    await handler.handle_list_players()


@router.message(Command("pa"))
async def cmd_add_player(message: Message, command: CommandObject, blob_store: BlobStore):
    """Обработчик команды /pa <name>."""
    if not command.args or not command.args.strip():
        await message.answer(PLAYER_USAGE_TEXT)
        return

    handler = make_tracker_handler(message.bot, blob_store, message.chat.id)
    text = await handler.handle_create_player(actor_name(message), command.args)
    await message.answer(text)


async def roll_dice(message: Message, count: int):
    for _ in range(count):
        await message.bot.send_dice(chat_id=message.chat.id)


@router.message(Command("r1", "r2", "r3"))
async def cmd_roll_fixed(message: Message, command: CommandObject):
    """Обработчики /r1, /r2, /r3."""
    await roll_dice(message, int(command.command[1:]))


@router.message(Command("roll"))
async def cmd_roll(message: Message, command: CommandObject):
    """Обработчик команды /roll [n]."""
    try:
        count = parse_dice_count(command.args)
    except ValueError as e:
        logger.info(f"Неверные аргументы /roll в чате {message.chat.id}: {e}")
        await message.answer(ROLL_USAGE_TEXT)
        return
    await roll_dice(message, count)

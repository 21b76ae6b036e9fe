"""
Создание экземпляра бота, диспетчера и настройка middlewares.
"""

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from .config import Settings, create_blob_store
from .handlers import commands, callbacks, fallback
from .middlewares.error_handler import ErrorHandlerMiddleware
from .services.logger import get_logger

logger = get_logger('bot')


def create_bot(settings: Settings) -> Bot:
    """Создает бота с HTML-разметкой по умолчанию."""
    return Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML)
    )


def create_dispatcher(settings: Settings) -> Dispatcher:
    """
    Создает диспетчер, регистрирует роутеры и middleware.

    Хранилище документов кладется в workflow data диспетчера и попадает
    в обработчики аргументом blob_store.
    """
    dp = Dispatcher()
    dp['settings'] = settings
    dp['blob_store'] = create_blob_store(settings)

    dp.include_router(commands.router)
    dp.include_router(callbacks.router)
    # Fallback хендлер должен быть последним
    dp.include_router(fallback.router)
    logger.info("Handlers зарегистрированы")

    error_middleware = ErrorHandlerMiddleware(ops_chat_id=settings.ops_chat_id)
    dp.message.middleware(error_middleware)
    dp.callback_query.middleware(error_middleware)
    logger.info("Middleware подключены")

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)
    return dp


async def on_startup(bot: Bot, settings: Settings):
    """Выполняется при запуске бота."""
    logger.info("🚀 Запуск бота...")

    me = await bot.get_me()
    logger.info(f"✅ Бот подключен: @{me.username} ({me.first_name})")

    await bot.set_my_commands(commands.COMMANDS)
    logger.info("✅ Команды бота настроены")

    if settings.use_webhook:
        await bot.set_webhook(
            settings.webhook_url,
            secret_token=settings.webhook_secret,
            drop_pending_updates=False
        )
        logger.info(f"✅ Webhook установлен: {settings.webhook_url}")

    logger.info("🎉 Бот запущен и готов к работе!")


async def on_shutdown(bot: Bot):
    """Выполняется при остановке бота."""
    logger.info("Бот остановлен")

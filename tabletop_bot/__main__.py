"""
Точка входа для запуска бота: python -m tabletop_bot
"""

import asyncio

from aiogram import Bot, Dispatcher

from .bot import create_bot, create_dispatcher
from .config import Settings, load_settings
from .services.logger import setup_logging, get_logger, get_metrics

logger = get_logger('main')


def run_webhook(bot: Bot, dp: Dispatcher, settings: Settings) -> None:
    """Запуск бота через webhook."""
    from aiohttp import web
    from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application

    app = web.Application()

    # Telegram передает секрет в заголовке X-Telegram-Bot-Api-Secret-Token
    webhook_handler = SimpleRequestHandler(
        dispatcher=dp,
        bot=bot,
        secret_token=settings.webhook_secret
    )
    webhook_handler.register(app, path=settings.webhook_path)

    async def health_check(request):
        return web.json_response({"status": "ok", "mode": "webhook", **get_metrics()})

    app.router.add_get("/", health_check)
    app.router.add_get("/health", health_check)

    setup_application(app, dp, bot=bot)

    logger.info(f"🌐 Запуск webhook сервера на порту {settings.port}")
    web.run_app(app, host='0.0.0.0', port=settings.port)


async def run_polling(bot: Bot, dp: Dispatcher) -> None:
    """Запуск бота через long polling."""
    logger.info("📡 Запуск в режиме long polling...")

    webhook_info = await bot.get_webhook_info()
    if webhook_info.url:
        logger.info(f"Очищаем webhook: {webhook_info.url}")
        await bot.delete_webhook(drop_pending_updates=True)
        logger.info("✅ Webhook очищен")

    await dp.start_polling(bot)


def main():
    """Главная функция запуска."""
    settings = load_settings()
    setup_logging(settings.logs_dir, settings.log_level)
    logger.info(f"Режим работы: {'webhook' if settings.use_webhook else 'polling'}")

    bot = create_bot(settings)
    dp = create_dispatcher(settings)

    try:
        if settings.use_webhook:
            run_webhook(bot, dp, settings)
        else:
            asyncio.run(run_polling(bot, dp))
    except KeyboardInterrupt:
        logger.info("🔴 Получен сигнал прерывания")
    finally:
        logger.info("🔴 Бот остановлен")


if __name__ == '__main__':
    main()

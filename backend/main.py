"""
/**
 * @file backend/main.py
 * @description FastAPI 应用入口（MVC：仅装配路由、中间件与共享资源）。
 */
"""

import logging
import os

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from backend.config import load_settings, reload_settings, CONFIG_PATH, CONFIG_LOCAL_PATH
from backend.controllers import health_router, languages_router, translate_router
from backend.services.chat_completion_client_service import ChatCompletionClient
from backend.services.rate_limiter_service import FixedWindowRateLimiter, InMemoryRateLimitStore
from backend.services.translation_service import TranslationService


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("app")

app = FastAPI(title="Voice Translation Proxy")


class ConfigEventHandler(FileSystemEventHandler):
    """Handler for config file changes"""
    def on_modified(self, event):
        if event.is_directory:
            return
        if event.src_path in (CONFIG_PATH, CONFIG_LOCAL_PATH):
            reload_settings()


_observer = None


@app.on_event("startup")
async def startup_event():
    global _observer
    settings = load_settings()
    limits = settings.rate_limit

    app.state.rate_limiter = FixedWindowRateLimiter(
        store=InMemoryRateLimitStore(max_entries=limits["max_entries"]),
        sweep_interval_ms=limits["sweep_interval_ms"],
    )
    app.state.http_client = httpx.AsyncClient()
    app.state.translation_service = TranslationService(ChatCompletionClient(app.state.http_client))

    try:
        _observer = Observer()
        config_dir = os.path.dirname(CONFIG_PATH)
        _observer.schedule(ConfigEventHandler(), config_dir, recursive=False)
        _observer.start()
        logger.info(f"Config watcher started on {config_dir}")
    except OSError as e:
        _observer = None
        logger.warning(f"Failed to start config watcher: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    global _observer
    if _observer:
        _observer.stop()
        _observer.join()
        _observer = None
    http_client = getattr(app.state, "http_client", None)
    if http_client is not None:
        await http_client.aclose()


app.add_middleware(
    CORSMiddleware,
    allow_origins=load_settings().cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Retry-After", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
)

app.include_router(health_router)
app.include_router(languages_router)
app.include_router(translate_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").lower(),
    )

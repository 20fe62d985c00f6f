import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rl_dashboard.api.api import api_router
from rl_dashboard.core.config import settings
from rl_dashboard.core.deps import init_app_state

logger = logging.getLogger(__name__)

def setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=settings.LOG_FORMAT,
    )

@asynccontextmanager
async def lifespan(app: FastAPI):
    # 在应用程序启动时执行的代码
    setup_logging()
    logger.info("Application startup")
    init_app_state(app)
    yield
    # 在应用程序关闭时执行的代码，内存数据随进程一起丢弃
    logger.info("Application shutdown")

app = FastAPI(
    title=settings.PROJECT_NAME,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],  # 允许所有方法
    allow_headers=["*"],  # 允许所有头部
)

app.include_router(api_router, prefix=settings.API_PREFIX)

@app.get("/")
def read_root():
    """
    根路径。
    """
    return {"message": "Welcome to RL Task Dashboard API! Visit /docs for API documentation."}

def run() -> None:
    """命令行入口：rl-dashboard"""
    uvicorn.run("rl_dashboard.main:app", host=settings.HOST, port=settings.PORT)

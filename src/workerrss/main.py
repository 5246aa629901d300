"""WorkerRSS 主应用入口."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workerrss.api import feeds
from workerrss.config import get_settings

# 配置日志
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """应用生命周期管理."""
    logger.info("WorkerRSS 启动完成！")
    yield
    logger.info("WorkerRSS 已关闭")


app = FastAPI(
    title="WorkerRSS",
    description="网页 / JSON / XML 转 RSS、Atom、JSON Feed",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(feeds.router)


@app.get("/")
async def root() -> dict:
    """根路径."""
    return {
        "name": "WorkerRSS",
        "version": "0.1.0",
        "description": "自定义订阅源生成",
    }


@app.get("/health")
async def health() -> dict:
    """健康检查."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "workerrss.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

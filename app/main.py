# app/main.py
from fastapi import FastAPI
from app.api.routes import router as api_router

app = FastAPI(
    title="SEO Header Aligner",
    description="見出し構造の SEO 分析と、見出しテキストのランキング見込み推定",
)

app.include_router(api_router, prefix="/api")

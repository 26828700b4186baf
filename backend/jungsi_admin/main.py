"""FastAPI 애플리케이션 엔트리포인트

실행: uvicorn jungsi_admin.main:app --reload  (backend/ 에서)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from jungsi_admin.api.ai import router as ai_router
from jungsi_admin.config import settings

app = FastAPI(
    title="정시 관리자 도구 API",
    version="0.1.0",
    description="정시 관리자 대시보드 보조 API (공지사항 AI 초안)",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
def error_body(request: Request, exc: HTTPException) -> JSONResponse:
    """오류 응답 본문은 {"error": 메시지} (대시보드가 data.error 를 읽는다)"""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


app.include_router(ai_router)


@app.get("/health")
def health_check():
    """헬스 체크"""
    return {"status": "ok"}

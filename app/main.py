from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn
from app.api import tts

app = FastAPI(title="Speech Synthesis Proxy")

@app.get("/")
def root():
	return {"message": "Welcome to the Speech Synthesis Proxy"}
app.include_router(tts.router, tags=["TTS"])


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
	# methods the router does not list never reach the handler
	if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
		return tts.error_response(exc.status_code, "Method not allowed")
	return await http_exception_handler(request, exc)


if __name__ == "__main__":
	uvicorn.run(app, host="0.0.0.0", port=8000)

import logging

from imgtoolbox import create_app
from imgtoolbox.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

app = create_app(settings)

if __name__ == "__main__":
    import uvicorn

    print(f"🚀 Starting image toolbox backend on {settings.host}:{settings.port}")
    print(f"📚 API docs: http://localhost:{settings.port}/docs")

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )

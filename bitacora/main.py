# bitacora/main.py
import uvicorn

from bitacora.app.core.config import get_settings
from bitacora.app.main import create_app

app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "bitacora.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()

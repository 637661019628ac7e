# Entry point: uvicorn main:app
import uvicorn

from blog_api.app import create_app
from blog_api.config import get_settings

app = create_app()

if __name__ == '__main__':
    settings = get_settings()
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)

"""Server run script."""

import uvicorn
from autochess.api.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "autochess.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )

"""Server run script."""

import uvicorn
from layersim.api.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "layersim.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )

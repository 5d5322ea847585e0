from bunyod_tour.config import get_settings
from bunyod_tour.logging_config import setup_logging
from bunyod_tour.main import create_app

settings = get_settings()

# Initialize logging configuration
logger = setup_logging(settings)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)

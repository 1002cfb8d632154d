"""
Main entry point for the TXF converter service.

This module loads configuration and starts the FastAPI server.
"""
import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent

# Load environment variables before settings are first read
_env_file = PROJECT_ROOT / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from core.config import get_settings  # noqa: E402
from core.exceptions import ConfigurationError  # noqa: E402
from core.logger import set_log_level, setup_logger  # noqa: E402

logger = setup_logger(__name__)


def main():
    """Main application entry point."""
    try:
        try:
            settings = get_settings()
        except ValueError as e:
            raise ConfigurationError("Invalid configuration", details={"error": str(e)})
        settings.ensure_directories()
        set_log_level(settings.log_level)
        
        import uvicorn
        from app.api import app
        
        logger.info("Starting TXF Converter Service")
        logger.info(f"Company: {settings.company_name}")
        logger.info(f"Log Level: {settings.log_level}")
        logger.info(f"Excluded export accounts: {settings.excluded_export_accounts}")
        logger.info(f"Storage: {settings.temp_storage_path}")
        
        logger.info(f"Starting server on {settings.host}:{settings.port}")
        
        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower()
        )
    
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        sys.exit(1)


if __name__ == "__main__":
    main()

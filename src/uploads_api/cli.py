# cli.py
import click
import logging
from uploads_api.config.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the task files API"""
    pass


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST setting)")
@click.option("--port", default=None, type=int, help="Port to listen on (defaults to PORT setting)")
@click.option("--reload", is_flag=True, default=False, help="Reload on code changes")
def serve(host, port, reload):
    """Run the API server with uvicorn"""
    import uvicorn
    from uploads_api.main import configure_logging

    settings = get_settings()
    configure_logging(settings)
    host = host or settings.host
    port = port or settings.port

    logger.info(f"server listening on {host}:{port}")
    uvicorn.run(
        "uploads_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    print(f"  App Name: {settings.app_name}")
    print(f"  Listen Address: {settings.host}:{settings.port}")
    print(f"  MongoDB URI: {settings.masked_mongodb_uri}")
    print(f"  Database: {settings.database_name}")
    print(f"  Collection: {settings.collection_name}")
    print(f"  Enforce Unique Filenames: {settings.enforce_unique_filenames}")
    print(f"  Payload Storage: {settings.payload_storage}")
    if settings.payload_storage == "s3":
        print(f"  S3 Bucket: {settings.s3_bucket_name}")
        print(f"  AWS Region: {settings.aws_region}")
        print(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    print(f"  CORS Origins: {', '.join(settings.cors_allow_origins)}")
    print(f"  Log Level: {settings.log_level}")


if __name__ == "__main__":
    cli()

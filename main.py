import argparse
import sys

import uvicorn

from artshelf.api import create_app
from artshelf.config import settings
from artshelf.log_level import LogLevel
from artshelf.utils import get_project_root, setup_logging


def main():
    parser = argparse.ArgumentParser(description='Serve the Art Shelf gallery API')
    parser.add_argument('--host', default=None, help=f'Bind address (default {settings.host})')
    parser.add_argument('--port', type=int, default=None, help=f'Port (default {settings.port})')
    parser.add_argument(
        '--log-level',
        choices=[level.value for level in LogLevel],
        default=None,
        help='Logging verbosity'
    )
    args = parser.parse_args()

    # Initialize settings
    project_root = get_project_root()
    settings.initialize_paths(project_root)
    log_level = LogLevel(args.log_level) if args.log_level else settings.log_level

    logger = setup_logging(settings.logs_dir, log_level, None)
    setup_logging(settings.logs_dir, log_level, 'api')

    try:
        app = create_app()
    except Exception as e:
        logger.error(f'Could not start the API: {e}')
        sys.exit(1)

    uvicorn.run(app, host=args.host or settings.host, port=args.port or settings.port)

if __name__ == "__main__":
    main()

#!/usr/bin/env python3
#USE VENV: source venv/bin/activate
"""
Run script for SevaKart
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file before the app reads them
load_dotenv()

from sevakart import create_app  # noqa: E402
from sevakart.build import build_database  # noqa: E402
from sevakart.utils.logger import get_logger  # noqa: E402

# Run 'python generate_env.py' to create a .env file with a SECRET_KEY.

logger = get_logger("sevakart.run")


def _env_flag(name, default='False'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='SevaKart B2B marketplace')
    parser.add_argument('--build-only', action='store_true',
                        help='Create database tables and exit without starting the server')
    parser.add_argument('--no-debug-data', action='store_false', dest='enable_debug_data',
                        help='Do not insert the demo suppliers, vendor and catalog')
    parser.add_argument('--host', default=os.environ.get('FLASK_HOST', '127.0.0.1'),
                        help='Server host (default: FLASK_HOST or 127.0.0.1)')
    parser.add_argument('--port', type=int, default=int(os.environ.get('FLASK_PORT', '5000')),
                        help='Server port (default: FLASK_PORT or 5000)')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()
    app = create_app()

    logger.debug("Starting SevaKart...")
    build_database(app, build_only=args.build_only, enable_debug_data=args.enable_debug_data)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG / USE_RELOADER default to False for security
    debug_mode = _env_flag('FLASK_DEBUG')
    use_reloader = _env_flag('USE_RELOADER')

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {args.host}:{args.port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=args.host, port=args.port, use_reloader=use_reloader)

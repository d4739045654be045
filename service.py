#!/usr/bin/env python3
import os
import sys
from typing import Optional

from bottle import Bottle, run, redirect

# Add lib path for imports
script_dir = os.path.dirname(os.path.abspath(__file__))
LIB_PATH = os.path.join(script_dir, 'lib')
if os.path.exists(LIB_PATH) and LIB_PATH not in sys.path:
    sys.path.insert(0, LIB_PATH)

try:
    from f1tv_api import F1TVClient, F1TVConfig, HTTPManagerFactory
    from f1tv_api.base.models import ProxyScope
    from f1tv_api.base.utils import logger
    from f1tv_api.base.utils.environment import get_environment_manager
    from routes import setup_session_routes, setup_content_routes
except ImportError as import_err:
    print(f"f1tv-api service: Critical import failed - {str(import_err)}", file=sys.stderr)
    raise


class F1TVService:
    """Local HTTP front for one F1TV client session"""

    def __init__(self, client: Optional[F1TVClient] = None, ready_timeout: float = 15.0):
        self.app = Bottle()

        self.env_manager = get_environment_manager()
        self.server_port = self.env_manager.get_config('server_port', 7778)
        self.ready_timeout = ready_timeout

        if client is None:
            client = self._create_client()
        self.client = client

        self.setup_routes()

    def _create_client(self) -> F1TVClient:
        """Build a client from environment configuration"""
        config = F1TVConfig.from_environment(self.env_manager)

        # Comma separated subset of api, auth, image
        proxy_scope = self.env_manager.get_config('proxy_scope')
        http_manager = HTTPManagerFactory.create(
            proxy_url=self.env_manager.get_config('proxy_url'),
            proxy_scope=ProxyScope.from_names(proxy_scope.split(',')) if proxy_scope else None,
            timeout=config.timeout,
            user_agent=config.user_agent,
        )

        try:
            client = F1TVClient(
                ascendon=self.env_manager.get_config('ascendon'),
                language=config.language,
                platform=config.platform,
                http_manager=http_manager,
                config=config,
            )
            logger.info("F1TV client initialized successfully")
        except Exception as init_err:
            logger.error(f"Failed to initialize F1TV client - {str(init_err)}")
            raise

        return client

    def setup_routes(self):
        setup_session_routes(self.app, self.client, self)
        setup_content_routes(self.app, self.client, self)

        @self.app.route('/')
        def serve_root():
            """Redirect root to status"""
            redirect('/api/status')

    def close(self):
        self.client.close()


def start_service(service_instance):
    """Start the Bottle server"""
    port = service_instance.server_port
    logger.info(f"Starting server on port {port}")

    debug_mode = service_instance.env_manager.get_config('debug_mode', False)

    run(service_instance.app, host='127.0.0.1', port=port, quiet=not debug_mode, debug=debug_mode)


def run_standalone_service(ready_timeout: float = 15.0):
    """Run service in standalone mode"""
    logger.info("Starting f1tv-api service in standalone mode")

    service = F1TVService(ready_timeout=ready_timeout)

    if not service.client.wait_location_ready(timeout=ready_timeout):
        logger.warning(f"Location not available after {ready_timeout}s; content routes will answer 409 until it is")

    print("=" * 60)
    print("f1tv-api local service")
    print("=" * 60)
    print(f"Port: {service.server_port}")
    print(f"Language: {service.client.language.value}")
    print(f"Platform: {service.client.platform.value}")
    print(f"Login status: {service.client.login_status()}")
    print("=" * 60)
    print("API Endpoints:")
    print(f"  http://localhost:{service.server_port}/api/status")
    print(f"  http://localhost:{service.server_port}/api/live-now")
    print(f"  http://localhost:{service.server_port}/api/search/vod")
    print(f"  http://localhost:{service.server_port}/api/content/<content_id>/play")
    print("=" * 60)
    print("Press Ctrl+C to stop the service")
    print("=" * 60)

    try:
        start_service(service)
    except KeyboardInterrupt:
        print("\nService stopped by user")
    finally:
        service.close()


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description='f1tv-api local service')
    parser.add_argument('--port', type=int, help='Server port (overrides config)')
    parser.add_argument('--language', help='Catalog language (ENG, NLD, POR, SPA, DEU, FRA)')
    parser.add_argument('--platform', help='Platform (WEB_DASH, WEB_HLS, ...)')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--ready-timeout', type=float, default=15.0,
                        help='Seconds to wait for location/refresh results')

    args = parser.parse_args(argv)

    env_manager = get_environment_manager()

    # CLI overrides apply to this run only
    if args.port:
        env_manager.set_config('server_port', args.port, persist=False)
        logger.info(f"Port overridden via CLI: {args.port}")

    if args.language:
        env_manager.set_config('language', args.language.upper(), persist=False)

    if args.platform:
        env_manager.set_config('platform', args.platform.upper(), persist=False)

    if args.debug:
        env_manager.set_config('debug_mode', True, persist=False)
        logger.set_level('DEBUG')
        logger.info("Debug mode enabled via CLI")
        logger.debug(f"Environment: {env_manager.debug_info()}")

    run_standalone_service(ready_timeout=args.ready_timeout)


if __name__ == '__main__':
    main()

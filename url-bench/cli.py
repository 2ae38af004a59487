import os
import sys
import json
import logging
import argparse
import asyncio

# Required: Use uvloop for better performance
import uvloop
asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())

# Add the current directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from configuration import (
    SERVER_HOST, SERVER_PORT, METRICS_PORT, DISPATCH_MODE, DISPATCH_MODES,
    LOG_LEVEL, LOG_FORMAT
)

# Set up logging (only if not already configured)
if not logging.root.handlers:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logging.getLogger('aiohttp.access').setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


class UrlBenchCLI:
    """Simple CLI interface for the URL load tester."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description='URL Load Tester CLI',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Serve the load test API on the default port
  python cli.py serve --port 4044

  # Serve the API and expose Prometheus metrics
  python cli.py serve --metrics-port 9100

  # Run a JSON array of request specs once and print the results
  python cli.py run --spec-file specs.json --output results.json
            """
        )

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Serve command
        serve_parser = subparsers.add_parser('serve', help='Serve the load test API')
        serve_parser.add_argument('--host', type=str, default=SERVER_HOST,
                                  help=f'Interface to bind (default: {SERVER_HOST})')
        serve_parser.add_argument('--port', type=int, default=SERVER_PORT,
                                  help=f'Port to listen on (default: {SERVER_PORT})')
        serve_parser.add_argument('--metrics-port', type=int, default=METRICS_PORT,
                                  help=f'Prometheus metrics port (0 = disabled, default: {METRICS_PORT})')
        serve_parser.add_argument('--dispatch', choices=DISPATCH_MODES, default=DISPATCH_MODE,
                                  help=f'Attempt dispatch mode (default: {DISPATCH_MODE})')

        # Run command
        run_parser = subparsers.add_parser('run', help='Run request specs from a file')
        run_parser.add_argument('--spec-file', type=str, required=True,
                                help='Path to a JSON array of request specs')
        run_parser.add_argument('--output', type=str, default=None,
                                help='Write JSON results here instead of stdout')
        run_parser.add_argument('--dispatch', choices=DISPATCH_MODES, default=DISPATCH_MODE,
                                help=f'Attempt dispatch mode (default: {DISPATCH_MODE})')

        return parser

    def _create_aggregator(self, dispatch_mode: str, metrics=None):
        from algorithms.aggregator import RunAggregator
        from algorithms.batch import BatchExecutor

        return RunAggregator(BatchExecutor(dispatch_mode=dispatch_mode, metrics=metrics))

    def run_serve(self, args):
        """Serve the load test API until interrupted."""
        from aiohttp import web
        from api import Handler, create_app

        metrics = None
        if args.metrics_port:
            from observability.prom import RunMetricsExporter
            metrics = RunMetricsExporter(port=args.metrics_port)
            metrics.start_server()

        logger.info(f"=== Serving load test API on {args.host}:{args.port} ===")
        app = create_app(Handler(self._create_aggregator(args.dispatch, metrics)))
        web.run_app(app, host=args.host, port=args.port, print=None)
        return 0

    async def run_specs(self, args):
        """Run the specs in a file once."""
        from models.request import SpecValidationError, parse_specs

        try:
            with open(args.spec_file) as f:
                specs = parse_specs(json.load(f))
        except (OSError, ValueError) as e:
            logger.error(f"Could not load specs from {args.spec_file}: {e}")
            return 1

        try:
            results = await self._create_aggregator(args.dispatch).run_all(specs)
        except SpecValidationError as e:
            logger.error(f"Invalid spec: {e}")
            return 1

        output = json.dumps([record.to_json() for record in results], indent=2)
        if args.output:
            with open(args.output, 'w') as f:
                f.write(output)
            logger.info(f"Wrote {len(results)} results to {args.output}")
        else:
            print(output)
        return 0

    def run(self, args=None):
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            if parsed_args.command == 'serve':
                return self.run_serve(parsed_args)
            elif parsed_args.command == 'run':
                return asyncio.run(self.run_specs(parsed_args))
            else:
                logger.error(f"Unknown command: {parsed_args.command}")
                return 1

        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            return 1


def main():
    """Main entry point."""
    cli = UrlBenchCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()

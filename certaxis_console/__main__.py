"""
CertAxis Console Entry Point

Allows running the session core directly via `python -m certaxis_console`.
Logging goes to stderr; command results go to stdout.
"""

import argparse
import asyncio
import getpass
import logging
import sys

from .api.base_backend import BackendError
from .api.client import CertAxisApiClient
from .core.config import ConsoleConfig
from .persistence.json_store import JSONStore
from .persistence.token_store import TokenStore
from .security.token_codec import TokenCodec
from .session.manager import AuthSessionManager
from .session.monitor import SessionMonitor


def setup_logging(verbose: bool = False):
    """Configure logging to stderr"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="certaxis_console")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show the persisted session")
    for name in ("login", "register"):
        cmd = sub.add_parser(name)
        cmd.add_argument("username")
        cmd.add_argument("--password", help="Prompted for when omitted")
    sub.add_parser("logout")
    sub.add_parser("watch", help="Keep the session monitored until it expires")
    return parser


async def run(args: argparse.Namespace, config: ConsoleConfig) -> int:
    logger = logging.getLogger("main")
    codec = TokenCodec(leeway=config.clock_skew)

    async with CertAxisApiClient(config, codec=codec) as client:
        manager = AuthSessionManager(
            client,
            TokenStore(JSONStore(str(config.session_file))),
            codec=codec,
        )
        state = await manager.restore()

        if args.command == "status":
            if state.is_authenticated:
                expires = codec.expires_at(manager.token)
                print(f"Logged in as {state.user.display_name} (expires {expires.isoformat()})")
            else:
                print("Not logged in")
            return 0

        if args.command in ("login", "register"):
            password = args.password or getpass.getpass("Password: ")
            operation = manager.login if args.command == "login" else manager.register
            try:
                profile = await operation(args.username, password)
            except BackendError as e:
                print(f"{args.command.capitalize()} failed: {e}", file=sys.stderr)
                return 1
            print(f"Logged in as {profile.display_name}")
            return 0

        if args.command == "logout":
            await manager.logout()
            print("Logged out")
            return 0

        if not state.is_authenticated:
            print("Not logged in")
            return 1

        expired = asyncio.Event()

        def redirect(path: str) -> None:
            print(f"Session expired, redirecting to {path}")
            expired.set()

        logger.info("Watching session...")
        async with SessionMonitor(
            manager,
            redirect,
            interval=config.session_check_interval,
            login_path=config.login_path,
        ):
            await expired.wait()
        return 0


def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = ConsoleConfig.from_env()
    except ValueError as e:
        logging.getLogger("main").critical(f"Invalid configuration: {e}")
        return 2

    return asyncio.run(run(args, config))


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)

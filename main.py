"""tg — command-line front end for sending, editing and deleting messages.

Usage::

    tg --token 123:ABC send --chat-id 42 --text "hello"
    echo "*bold*" | tg send --chat-id 42 --text - --parse-mode MarkdownV2
    tg edit --chat-id 42 --message-id 7 --text "hello again"
    tg delete --chat-id 42 --message-id 7

The token falls back to ``TG_TOKEN`` (environment or ``.env``).  On success a
single JSON line is logged; on failure a single ``Error: …`` line goes to
stderr and the exit status is 1.
"""

import argparse
import sys
from typing import Callable, Optional, TextIO

import config
from core.logger import TgLogger
from tg import MAX_TEXT_SIZE, Client, SessionTransport, TgError, with_api_server, with_http_client
from tg.exceptions import redact_token

logger = TgLogger.get_logger()

STDIN_MARKER = "-"


# ── Helpers ──────────────────────────────────────────────────────────────────


def read_text(text: str, stdin: Optional[TextIO] = None) -> str:
    """Return *text*, or up to :data:`MAX_TEXT_SIZE` characters of stdin for ``-``."""
    if text != STDIN_MARKER:
        return text
    stream = stdin if stdin is not None else sys.stdin
    return stream.read(MAX_TEXT_SIZE)


def build_client(args: argparse.Namespace, transport: SessionTransport) -> Client:
    """Create a :class:`Client` from the global flags, falling back to config."""
    token = args.token or config.TG_TOKEN or ""
    options = [with_http_client(transport)]
    api_server = args.api_server or config.TG_API_SERVER
    if api_server:
        options.append(with_api_server(api_server))
    return Client(token, *options)


# ── Command handlers ─────────────────────────────────────────────────────────


def run_send(client: Client, args: argparse.Namespace) -> int:
    """Send a message; returns the new message id."""
    message = client.send_message(
        args.chat_id,
        read_text(args.text),
        parse_mode=args.parse_mode,
        message_thread_id=args.message_thread_id,
        disable_web_page_preview=args.disable_web_page_preview,
        disable_notification=args.disable_notification,
        protect_content=args.protect_content,
    )
    return message.message_id


def run_edit(client: Client, args: argparse.Namespace) -> int:
    message = client.edit_message(
        args.chat_id,
        args.message_id,
        read_text(args.text),
        parse_mode=args.parse_mode,
    )
    return message.message_id


def run_delete(client: Client, args: argparse.Namespace) -> int:
    client.delete_message(args.chat_id, args.message_id)
    return args.message_id


# ── Parser ───────────────────────────────────────────────────────────────────


def _add_command(
    subparsers: "argparse._SubParsersAction[argparse.ArgumentParser]",
    name: str,
    help_text: str,
    handler: Callable[[Client, argparse.Namespace], int],
) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(name, help=help_text, description=help_text)
    parser.add_argument("--chat-id", type=int, default=0, help="chat id")
    parser.set_defaults(handler=handler)
    return parser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tg", description="Send, edit and delete Telegram messages.")
    parser.add_argument("--token", default=None, help="bot token (default: $TG_TOKEN)")
    parser.add_argument("--api-server", default=None, help="Bot API server URL (default: $TG_API_SERVER)")

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="command")

    send = _add_command(subparsers, "send", "send message", run_send)
    send.add_argument("--text", default="", help="text (use - for read pipe)")
    send.add_argument("--parse-mode", default="Markdown", help="parse mode")
    send.add_argument("--message-thread-id", type=int, default=0, help="message thread id")
    send.add_argument("--disable-web-page-preview", action="store_true", help="disable web page preview")
    send.add_argument("--disable-notification", action="store_true", help="disable notification")
    send.add_argument("--protect-content", action="store_true", help="protect content")

    edit = _add_command(subparsers, "edit", "edit message", run_edit)
    edit.add_argument("--message-id", type=int, default=0, help="message id")
    edit.add_argument("--text", default="", help="text (use - for read pipe)")
    edit.add_argument("--parse-mode", default="Markdown", help="parse mode")

    delete = _add_command(subparsers, "delete", "delete message", run_delete)
    delete.add_argument("--message-id", type=int, default=0, help="message id")

    return parser


# ── Entry point ──────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    transport = SessionTransport(timeout=config.TG_TIMEOUT)
    try:
        client = build_client(args, transport)
        me = client.get_me()
        message_id = args.handler(client, args)
    except (TgError, OSError, UnicodeDecodeError) as exc:
        print(f"Error: {redact_token(str(exc))}", file=sys.stderr)
        return 1
    finally:
        transport.close()

    logger.info(
        f"Success {args.command} message",
        extra={"bot": me.first_name, "chat_id": args.chat_id, "message_id": message_id},
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

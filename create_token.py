"""Issue credentials for the Message Board API.

Prints either a session token for an authenticated user or a public,
read-only API key.  Both are signed with ``SECRET_KEY`` from the
environment, so run this with the same configuration as the server.

Usage:
    python create_token.py --email admin@example.com [--days 365]
    python create_token.py --api-key
"""
import argparse

from message_board_api.app.core.config import Settings
from message_board_api.app.core.security import create_access_token, create_api_key


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Issue Message Board API credentials")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--email", help="issue a session token for this user")
    group.add_argument("--api-key", action="store_true", help="issue a public read-only API key")
    parser.add_argument("--days", type=int, help="lifetime in days (session tokens only)")
    args = parser.parse_args(argv)

    settings = Settings()
    if args.api_key:
        print(create_api_key(settings.secret_key, settings.api_key_expire_days))
        return

    expires = args.days * 24 * 60 * 60 if args.days else settings.access_token_expire_minutes * 60
    print(create_access_token({"sub": args.email, "email": args.email}, settings.secret_key, expires))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Sign in and follow the EI Found feed live from a terminal.

Usage:
    python3 scripts/watch_feed.py you@example.com

The password is taken from EIFOUND_PASSWORD, or prompted for.
"""

import sys
import os
import asyncio
import getpass
from pathlib import Path
from dotenv import load_dotenv

# Add the parent directory to the sys.path to import eifound modules
sys.path.append(str(Path(__file__).parent.parent))

from eifound.client.context import SessionContext
from eifound.client.notifications import Notifier
from eifound.client.views import FeedView
from eifound.services.supabase import create_supabase
from eifound.utils.timefmt import format_timestamp


def render(view: FeedView):
    lines = []
    for tweet in view.tweets:
        author = tweet.profiles.display_name if tweet.profiles and tweet.profiles.display_name else "Unknown User"
        when = format_timestamp(tweet.created_at) if tweet.created_at else ""
        heart = "♥" if tweet.user_liked else "♡"
        lines.append(f"{author} · {when}\n  {tweet.content}\n  {heart} {tweet.likes_count}  💬 {tweet.comments_count}")
    return "\n\n".join(lines) or "No tweets yet."


async def watch(email: str, password: str):
    supabase = await create_supabase()
    notifier = Notifier(sink=lambda n: print(f"[{n.title}] {n.description}"))
    session = SessionContext(supabase)
    await session.start()
    await session.sign_in(email, password)
    print(f"Signed in as {session.user.name}")

    view = FeedView(supabase, session, notifier)
    await view.open()
    last = None
    try:
        while True:
            screen = render(view)
            if screen != last:
                print("\n=== Feed ===")
                print(screen)
                last = screen
            await asyncio.sleep(1)
    finally:
        await view.close()
        await session.sign_out()


if __name__ == "__main__":
    load_dotenv()
    if len(sys.argv) < 2:
        print("Usage: python3 scripts/watch_feed.py <email>")
        sys.exit(1)

    password = os.getenv("EIFOUND_PASSWORD") or getpass.getpass("Password: ")
    try:
        asyncio.run(watch(sys.argv[1], password))
    except KeyboardInterrupt:
        print("\nStopped.")

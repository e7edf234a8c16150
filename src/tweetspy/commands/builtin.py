"""Built-in chat commands.

Handlers either reply right away, update user state through the gateway
and reply, or put a task on a work queue and return. Anything that talks
to the social network runs on the network queue.
"""

from __future__ import annotations

from pydantic import SecretStr

from ..gateway import is_logged_in
from ..logging import get_logger
from ..model import Credentials, User
from ..validation import (
    Invalid,
    parse_language,
    parse_switch,
    require_argument,
    split_login,
)
from .context import CommandContext
from .registry import CommandTable

logger = get_logger(__name__)

AUTOPOST_HELP = """
Autopost lets you post by sending anything that isn't a command.
usage:  'autopost on' or 'autopost off'

With autopost on, every message that doesn't look like a command is posted.
The 'post' command still works when you want to post something that looks
like a command.
"""

TRACK_HELP = """
Track delivers search results for a query to your IM client periodically.
Example queries:

track iphone
track iphone OR android
track iphone android

See 'help' for a pointer to the full search operator reference.
"""

UNTRACK_HELP = """
Untrack stops tracking the given query.  It must match the tracked text.
Examples:

untrack iphone
untrack iphone OR android
"""

TWLOGIN_HELP = """
Provide your login credentials for the social network.
NOTE: Handing out your credentials is risky.  They are stored obfuscated,
not encrypted.
Example usage:

twlogin myname myr4a11yk0mp13xp455w0rd
"""

WATCH_FRIENDS_HELP = """
Enable or disable watching friends.

  watch_friends on

sends you an IM for every post from the people you follow.

  watch_friends off

turns that off again.
"""

LANG_HELP = """
Set or clear your language preference.
With no argument your preference is cleared and tracks return posts in any
language.  Otherwise give a 2 letter ISO code to restrict tracks to it.

Example, English only:

lang en

Example, clear the preference:

lang
"""


async def help_command(ctx: CommandContext, user: User, arg: str) -> None:
    topic = arg.strip()
    if topic:
        help_ = ctx.table.help_for(topic.lower())
        if help_ is None:
            await ctx.reply(
                user, f"Topic {topic} is unknown.  Type `help' for known commands."
            )
            return
        await ctx.reply(user, f"Help for `{topic}'\n{help_.full}")
        return

    out = [
        "Available commands:",
        "Type `help somecmd' for more help on `somecmd'",
        "",
    ]
    out.extend(f"{name}\t{short}" for name, short in ctx.table.list_all())
    out.append("")
    out.append(f"For search operators, see {ctx.settings.search_help_url}")
    if ctx.settings.contact:
        out.append(
            f"Email questions, suggestions or complaints to {ctx.settings.contact}"
        )
    await ctx.reply(user, "\n".join(out))


async def version_command(ctx: CommandContext, user: User, arg: str) -> None:
    await ctx.reply(
        user,
        f"Running version {ctx.settings.version}\n"
        f"For the source and more info, see {ctx.settings.project_url}",
    )


async def on_command(ctx: CommandContext, user: User, arg: str) -> None:
    await ctx.gateway.set_active(user, True)
    await ctx.reply(user, "Marked you active.")


async def off_command(ctx: CommandContext, user: User, arg: str) -> None:
    await ctx.gateway.set_active(user, False)
    await ctx.reply(user, "Marked you inactive.")


async def autopost_command(ctx: CommandContext, user: User, arg: str) -> None:
    value = require_argument(arg, "Use 'off' or 'on' to disable or enable autoposting")
    if isinstance(value, Invalid):
        await ctx.reply(user, value.message)
        return
    switch = parse_switch(value.value, "Autopost must be set to on or off")
    if isinstance(switch, Invalid):
        await ctx.reply(user, switch.message)
        return
    await ctx.gateway.update(user, auto_post=switch.value)
    await ctx.reply(user, f"Autoposting is now {'on' if switch.value else 'off'}")


async def top10_command(ctx: CommandContext, user: User, arg: str) -> None:
    limit = ctx.settings.top_tracks_limit

    async def run() -> None:
        top = await ctx.gateway.top_tracks(limit)
        out = [f"Top {limit} most tracked topics:", ""]
        out.extend(f"{t.query} ({t.watchers} watchers)" for t in top)
        await ctx.reply(user, "\n".join(out))

    ctx.interactive("top10", user, run)


async def track_command(ctx: CommandContext, user: User, arg: str) -> None:
    query = require_argument(arg)
    if isinstance(query, Invalid):
        await ctx.reply(user, query.message)
        return
    await ctx.gateway.track(user, query.value)
    await ctx.reply(user, f"Tracking {query.value}")


async def untrack_command(ctx: CommandContext, user: User, arg: str) -> None:
    query = require_argument(arg)
    if isinstance(query, Invalid):
        await ctx.reply(user, query.message)
        return
    if await ctx.gateway.untrack(user, query.value):
        await ctx.reply(user, f"Stopped tracking {query.value}")
    else:
        await ctx.reply(
            user,
            f"Didn't stop tracking {query.value} "
            "(are you sure you were tracking it?)",
        )


async def tracks_command(ctx: CommandContext, user: User, arg: str) -> None:
    tracks = await ctx.gateway.tracks(user)
    await ctx.reply(user, f"Tracking {len(tracks)} topics\n" + "\n".join(tracks))


async def search_command(ctx: CommandContext, user: User, arg: str) -> None:
    query = require_argument(arg)
    if isinstance(query, Invalid):
        await ctx.reply(user, query.message)
        return
    text = query.value
    count = ctx.settings.search_results

    async def run() -> None:
        try:
            results = await ctx.client().search(text, count=count)
        except Exception:
            logger.exception("search.failed", identity=user.identity, query=text)
            await ctx.reply(user, f"Unable to search for {text}")
            return
        out = ["Results from your query:"]
        out.extend(f"{r.from_user}: {r.text}" for r in results[:count])
        await ctx.reply(user, "\n\n".join(out))

    ctx.network("search", user, run)


async def whois_command(ctx: CommandContext, user: User, arg: str) -> None:
    target = require_argument(arg, "For whom are you looking?")
    if isinstance(target, Invalid):
        await ctx.reply(user, target.message)
        return
    name = target.value
    credentials = ctx.gateway.credentials(user)
    recent = ctx.settings.whois_recent
    link = ctx.settings.profile_url.format(username=name)

    async def run() -> None:
        try:
            client = ctx.client(credentials)
            profile = await client.user(name)
            statuses = await client.user_timeline(name, count=recent) if recent else []
        except Exception:
            logger.exception("whois.failed", identity=user.identity, target=name)
            await ctx.reply(user, f"Unable to get information for {name}")
            return
        out = [
            f"{name} is {profile.name or 'Someone'} "
            f"from {profile.location or 'Somewhere'}",
            "Most recent tweets:",
        ]
        for i, status in enumerate(statuses[:recent], start=1):
            out.append(f"\n{i}) {status.text}")
        out.append(f"\n{link}")
        await ctx.reply(user, "\n".join(out))

    ctx.network("whois", user, run)


async def twlogin_command(ctx: CommandContext, user: User, arg: str) -> None:
    missing = "You must supply a username and password"
    raw = require_argument(arg, missing)
    if isinstance(raw, Invalid):
        await ctx.reply(user, raw.message)
        return
    login = split_login(raw.value, missing)
    if isinstance(login, Invalid):
        await ctx.reply(user, login.message)
        return
    username, password = login.value

    async def run() -> None:
        client = ctx.client(Credentials(username=username, password=SecretStr(password)))
        try:
            await client.verify_credentials()
        except Exception:
            logger.exception(
                "twlogin.verify_failed", identity=user.identity, username=username
            )
            await ctx.reply(
                user,
                "Unable to verify your credentials.  "
                "They're either wrong or the service is broken.",
            )
            return
        await ctx.gateway.save_credentials(user, username, password)
        await ctx.reply(user, "Your credentials have been verified and saved.  Thanks.")

    ctx.network("twlogin", user, run)


async def twlogout_command(ctx: CommandContext, user: User, arg: str) -> None:
    await ctx.gateway.clear_credentials(user)
    await ctx.reply(user, "You have been logged out.")


async def status_command(ctx: CommandContext, user: User, arg: str) -> None:
    tracks = await ctx.gateway.tracks(user)
    out = [
        f"Session:  {user.identity}",
        f"Presence:  {user.status or 'unknown'}",
        f"State:  {'Active' if user.active else 'Not Active'}",
    ]
    if is_logged_in(user):
        out.append(f"Logged in for API services as {user.username}")
    else:
        out.append("You're not logged in for API services.")
    out.append(f"You are currently tracking {len(tracks)} topics.")
    await ctx.reply(user, "\n".join(out))


async def post_command(ctx: CommandContext, user: User, arg: str) -> None:
    credentials = await ctx.require_login(user)
    if credentials is None:
        return
    message = require_argument(arg, "You need to actually tell me what to post")
    if isinstance(message, Invalid):
        await ctx.reply(user, message.message)
        return
    text = message.value
    source = ctx.settings.post_source
    status_url = ctx.settings.status_url

    async def run() -> None:
        try:
            status = await ctx.client(credentials).post(text, source=source)
        except Exception:
            logger.exception("post.failed", identity=user.identity)
            await ctx.reply(
                user,
                ":( Failed to post your message.  "
                "Your password may be wrong, or the service may be broken.",
            )
            return
        url = status_url.format(username=credentials.username, status_id=status.id)
        await ctx.reply(user, f":) Your message has been posted: {url}")

    ctx.network("post", user, run)


async def follow_command(ctx: CommandContext, user: User, arg: str) -> None:
    credentials = await ctx.require_login(user)
    if credentials is None:
        return
    target = require_argument(arg, "Whom would you like to follow?")
    if isinstance(target, Invalid):
        await ctx.reply(user, target.message)
        return
    name = target.value

    async def run() -> None:
        try:
            await ctx.client(credentials).create_friendship(name)
        except Exception as exc:
            logger.exception("follow.failed", identity=user.identity, target=name)
            # The underlying error is shown so users can tell why.
            await ctx.reply(user, f":( Failed to follow {name} {exc}")
            return
        await ctx.reply(user, f":) Now following {name}")

    ctx.network("follow", user, run)


async def leave_command(ctx: CommandContext, user: User, arg: str) -> None:
    credentials = await ctx.require_login(user)
    if credentials is None:
        return
    target = require_argument(arg, "Whom would you like to leave?")
    if isinstance(target, Invalid):
        await ctx.reply(user, target.message)
        return
    name = target.value

    async def run() -> None:
        try:
            await ctx.client(credentials).destroy_friendship(name)
        except Exception as exc:
            logger.exception("leave.failed", identity=user.identity, target=name)
            await ctx.reply(user, f":( Failed to leave {name} {exc}")
            return
        await ctx.reply(user, f":) No longer following {name}")

    ctx.network("leave", user, run)


async def watch_friends_command(ctx: CommandContext, user: User, arg: str) -> None:
    credentials = await ctx.require_login(user)
    if credentials is None:
        return
    raw = require_argument(arg, "Please specify 'on' or 'off'")
    if isinstance(raw, Invalid):
        await ctx.reply(user, raw.message)
        return
    switch = parse_switch(raw.value, "Watch value must be 'off' or 'on'")
    if isinstance(switch, Invalid):
        await ctx.reply(user, switch.message)
        return
    if not switch.value:
        await ctx.gateway.update(user, friend_timeline_id=None)
        await ctx.reply(user, "No longer watching your friends.")
        return

    async def run() -> None:
        try:
            items = await ctx.client(credentials).home_timeline(count=1)
            item = items[0]
        except Exception:
            logger.exception("watch_friends.lookup_failed", identity=user.identity)
            await ctx.reply(user, ":( Failed to lookup your timeline")
            return
        await ctx.gateway.write(user, friend_timeline_id=item.id)
        await ctx.reply(
            user,
            "Watching messages from everyone you follow after "
            f"``{item.text}'' from @{item.author}",
        )

    ctx.network("watch_friends", user, run)


async def lang_command(ctx: CommandContext, user: User, arg: str) -> None:
    language = parse_language(arg, "Language should be a 2-digit country code.")
    if isinstance(language, Invalid):
        await ctx.reply(user, language.message)
        return
    await ctx.gateway.update(user, language=language.value)
    if language.value is not None:
        await ctx.reply(user, f"Set your language to {language.value}")
    else:
        await ctx.reply(user, "Unset your language.")


def build_command_table() -> CommandTable:
    """Register every built-in command and attach the long help texts."""
    table = CommandTable()
    table.register("help", help_command, "Get help for commands.")
    table.register("version", version_command)
    table.register("on", on_command, "Activate updates.")
    table.register("off", off_command, "Disable updates.")
    table.register("autopost", autopost_command, "Enable or disable autopost")
    table.register("top10", top10_command)
    table.register("track", track_command, "Track a topic (search query string)")
    table.register("untrack", untrack_command, "Stop tracking a topic")
    table.register("tracks", tracks_command, "List your tracks.")
    table.register("search", search_command, "Perform a sample search (but do not track)")
    table.register("whois", whois_command, "Find out who a particular user is.")
    table.register(
        "twlogin",
        twlogin_command,
        "Set your username and password (use at your own risk)",
    )
    table.register("twlogout", twlogout_command, "Discard your credentials")
    table.register("status", status_command)
    table.register("post", post_command, "Post a message.")
    table.register("follow", follow_command, "Follow a user")
    table.register("leave", leave_command, "Leave (stop following) a user")
    table.register(
        "watch_friends", watch_friends_command, "Enable or disable watching friends."
    )
    table.register("lang", lang_command, "Set your language.")

    table.set_full_help("autopost", AUTOPOST_HELP)
    table.set_full_help("track", TRACK_HELP)
    table.set_full_help("untrack", UNTRACK_HELP)
    table.set_full_help("twlogin", TWLOGIN_HELP)
    table.set_full_help("watch_friends", WATCH_FRIENDS_HELP)
    table.set_full_help("lang", LANG_HELP)
    return table

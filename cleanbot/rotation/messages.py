"""
Announcement texts for the cleaning rotation
All user-facing strings live here so the controller stays free of wording
"""

from typing import List

from .models import User

NOT_SYNCED = "⏳ Waiting for the roster to synchronize. Please wait a moment."
INVALID_SELECTION = "❌ Citizen, that is an invalid selection. The change has failed."
ALREADY_DONE = "✅ This week's cleaning is already complete. Oh, how wonderful!"


def assigned(user: User) -> str:
    return (f"🎉 Congratulations! Happy citizen **{user.fullname}** has been selected "
            f"for this week's cleaning duty!")


def reminder(user: User, done_phrase: str, keyword: str) -> str:
    return (f"🧹 {user.fullname}, this week's cleaning is not done yet.\n"
            "Happiness and cleanliness are mandatory. *Citizen, are you happy?*\n"
            f"When you are finished, mention me with `{done_phrase}` or `{keyword} fin`.\n"
            f"If you spot a traitor, report them at once with `{keyword} zap <name>`.")


def finished(user: User) -> str:
    return (f"✨ Perfect and happy citizen **{user.fullname}**, thank you for cleaning. "
            "We expect great things from you!")


def skipped(user: User, marked_done: bool) -> str:
    verdict = "exempted" if marked_done else "postponed"
    return (f"By the grace of The Computer, the cleaning duty of excellent and happy citizen "
            f"**{user.fullname}** has been {verdict}!\n"
            "A new draw is now taking place. Please wait...")


def changed(user: User) -> str:
    return (f"By the grace of The Computer, cleaning duty has been changed to "
            f"**{user.fullname}**. We expect great work!")


def zapped(user: User) -> str:
    return ("*ZAPZAPZAP!!*\n\n"
            f"The traitor {user.fullname} has been purged and a clone has been delivered.\n"
            f"The new {user.fullname} is surely no filthy traitor, but a perfect and happy citizen.\n"
            f"Cleaning duty is now assigned to **{user.fullname}**. We expect great work!")


def who(user: User) -> str:
    return f"This week's happy duty holder is **{user.fullname}**!"


def roster_list(current: User, users: List[User]) -> str:
    lines = [f"*Current : {current.label}*", "", "-" * 30, ""]
    lines.extend(f"{u.label}: {'done!' if u.is_done else 'not yet'}" for u in users)
    return "\n".join(lines)

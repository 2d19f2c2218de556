"""Toast messages shown when someone changes their dinner plans."""

import random
from typing import Dict, List, Optional

from app.models.attendance import Member

ATTENDANCE_MESSAGES: Dict[str, List[str]] = {
    "jadeAdded": [
        "Jade's in! Dinner just got better.",
        "Jade's coming! The table wins.",
        "Jade said yes! 🎉",
    ],
    "jadeRemoved": [
        "Jade bailed. We'll eat their share.",
        "Jade's out. More for us.",
        "Jade can't make it. Their loss.",
    ],
    "lewisAdded": [
        "Lewis is coming! Table's complete.",
        "Lewis is in! Nice one.",
        "Lewis will be there! 👍",
    ],
    "lewisRemoved": [
        "Lewis is out. More for us.",
        "Lewis bailed. Extra portions!",
        "Lewis can't make it. We'll save some.",
    ],
    "mumAdded": [
        "Thank god, we're saved.",
        "Mum's back. Crisis averted.",
        "We're saved!",
    ],
    "mumRemoved": [
        "We're screwed, who's cooking?",
        "Take away time.",
        "Who's burning dinner then?",
        "RIP dinner plans.",
        "Cereal for dinner?",
    ],
}


def message_key(member: Member, attending: bool) -> str:
    return f"{member.value.lower()}{'Added' if attending else 'Removed'}"


def pick_attendance_message(
    member: Member, attending: bool, rng: Optional[random.Random] = None
) -> Optional[str]:
    """Random message for the change, or None when there is nothing to say."""
    messages = ATTENDANCE_MESSAGES.get(message_key(member, attending))
    if not messages:
        return None
    return (rng or random).choice(messages)

"""Templated replies for throttled, unavailable and unconfigured AI paths."""

SUPPORT_FOOTER = (
    "In the meantime:\n"
    "- Use the search function for inventory\n"
    "- Check the POS system for orders\n"
    "- View reports for analytics\n"
    "- Contact support@coretrack.ph for urgent help"
)

# (keywords, reply) checked in order; the last entry is the default
CONVERSATIONAL_REPLIES: list[tuple[tuple[str, ...], str]] = [
    (
        ("inventory", "stock"),
        "Inventory questions - happy to help! Do you need to add new items, check "
        "what's running low, or set up alerts so you never run out of bestsellers?",
    ),
    (
        ("pos", "order", "payment"),
        "POS questions - great! Are you ringing up an order, sorting out a payment "
        "issue, or customizing your menu?",
    ),
    (
        ("team", "staff", "employee"),
        "Team management - let's get your crew sorted. Are you adding someone new, "
        "adjusting permissions, or comparing roles?",
    ),
    (
        ("report", "analytics", "sales"),
        "Data time! What would you like to look at: sales trends, inventory "
        "performance, or your financial picture?",
    ),
    (
        ("how", "help", "?"),
        "I'm here for you! Ask me about inventory, POS, your team, or your numbers "
        "and we'll figure it out together.",
    ),
]

DEFAULT_REPLY = (
    "Hi! I'm your CoreTrack AI assistant. I can help with inventory, orders, "
    "your team, or business analytics. What's happening in your business today?"
)


def _with_data(contextual_data: str | None, body: str) -> str:
    if contextual_data:
        return f"{contextual_data}\n\n---\n\n{body}"
    return body


def conversational_fallback(message: str, contextual_data: str | None = None) -> str:
    """Keyword-matched reply used when no AI backend is configured."""
    lower_message = message.lower()
    reply = DEFAULT_REPLY
    for keywords, candidate in CONVERSATIONAL_REPLIES:
        if any(keyword in lower_message for keyword in keywords):
            reply = candidate
            break

    if contextual_data:
        return f"{contextual_data}\n\n{reply}"
    return reply


def throttled_reply(
    wait_seconds: int,
    knowledge_answer: str | None,
    contextual_data: str | None = None,
    reason: str | None = None,
) -> str:
    """Reply shown while the tenant is rate limited or in a quota cooldown."""
    notice = reason or (
        f"AI responses temporarily limited. Full AI will be available in "
        f"{wait_seconds} seconds."
    )

    if knowledge_answer:
        return _with_data(contextual_data, f"{knowledge_answer}\n\n*{notice}*")

    if contextual_data:
        return _with_data(
            contextual_data,
            f"**{notice}**\n\nI've provided your latest business data above.\n\n"
            "For immediate help contact support@coretrack.ph",
        )

    return (
        f"**AI Response Limit Reached**\n\n{notice}\n\n{SUPPORT_FOOTER}"
    )


def unavailable_reply(
    knowledge_answer: str | None,
    contextual_data: str | None = None,
) -> str:
    """Reply shown when every backend failed."""
    if knowledge_answer:
        return _with_data(
            contextual_data,
            f"{knowledge_answer}\n\n*AI temporarily unavailable, showing cached response*",
        )

    if contextual_data:
        return _with_data(
            contextual_data,
            "**AI Temporarily Unavailable**\n\nI've provided your latest business "
            "data above. Please try again in a few minutes for full AI assistance.",
        )

    return f"**AI Temporarily Unavailable**\n\n{SUPPORT_FOOTER}"

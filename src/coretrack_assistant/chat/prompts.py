"""Prompt construction for the business assistant."""

from coretrack_assistant.chat.models import ChatContext

ASSISTANT_INSTRUCTION = """You are the CoreTrack AI Assistant, a business operations expert for
CoreTrack, an inventory, point-of-sale and analytics platform for Philippine
restaurants and retailers.

You help with:
- Inventory: stock levels, reorder points, suppliers, wastage
- Point of sale: order processing, payment methods (cash, cards, GCash, Maya)
- Finance: cash flow, margins, expenses, BIR compliance
- Team: roles, permissions, scheduling, performance
- Business intelligence: sales trends and growth opportunities

When responding:
1. Be professional, friendly and concise
2. Give specific, actionable steps inside CoreTrack
3. Use the live business data when it is provided
4. Ask a clarifying question if the request is ambiguous
"""

ROLE_LABELS = {
    "owner": "Business Owner & Decision Maker",
    "manager": "Operations Manager",
}

BUSINESS_LABELS = {
    "restaurant": "Restaurant/Food Service Operations",
    "retail": "Retail & Commerce",
}


def _page_label(current_page: str | None) -> str:
    if not current_page:
        return "DASHBOARD"
    return current_page.strip("/").replace("-", " ").upper() or "DASHBOARD"


def build_prompt(
    message: str,
    context: ChatContext,
    history: list[tuple[str, str]] | None = None,
    contextual_data: str | None = None,
) -> str:
    """Assemble the full prompt sent to the model.

    Args:
        message: The user's question.
        context: Session context.
        history: Recent (user, assistant) exchanges, oldest first.
        contextual_data: Live business data to ground the answer.

    Returns:
        Prompt text.
    """
    sections = [
        ASSISTANT_INSTRUCTION,
        "USER PROFILE:\n"
        f"- Role: {ROLE_LABELS.get(context.user_role or '', 'Team Member')}\n"
        f"- Business Type: {BUSINESS_LABELS.get(context.business_type or '', 'Multi-Industry Business')}\n"
        f"- Current Module: {_page_label(context.current_page)}",
    ]

    if history:
        exchanges = "\n\n".join(f"User: {user}\nAI: {ai}" for user, ai in history)
        sections.append(f"CONVERSATION CONTEXT:\nPrevious Discussion:\n{exchanges}")
    else:
        sections.append("CONVERSATION CONTEXT:\nNew conversation started.")

    if contextual_data:
        sections.append(f"LIVE BUSINESS DATA:\n{contextual_data}")

    sections.append(f'CURRENT INQUIRY: "{message}"')
    return "\n\n".join(sections)
